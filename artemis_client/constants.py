"""Constants used throughout the Artemis client."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"

# REST routes
NOTIFICATIONS_PATH = "/api/notifications"
ASSESSMENTS_PATH = "/api/assessments"

# Real-time channel events
EVENT_NOTIFICATION_NEW = "notification:new"
EVENT_UNREAD_COUNT = "notification:unreadCount"
EVENT_GET_UNREAD_COUNT = "notification:getUnreadCount"
EVENT_MARK_READ = "notification:markRead"
EVENT_MARK_ALL_READ = "notification:markAllRead"

# Socket transports in order of preference
SOCKET_TRANSPORTS = ["websocket", "polling"]

# Client-local storage keys
SOUND_PREFERENCE_KEY = "artemis_notification_sound"

# Notification pagination
DEFAULT_PAGE_SIZE = 20

# Assessment timer thresholds (seconds remaining)
TIMER_WARNING_SECONDS = 300
TIMER_CRITICAL_SECONDS = 60
TIMER_PULSE_SECONDS = 30
