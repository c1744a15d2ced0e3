"""REST services for the marketplace backend."""

from artemis_client.services.api_client import ApiClient
from artemis_client.services.assessment_api import AssessmentApi
from artemis_client.services.notification_api import NotificationApi

__all__ = ["ApiClient", "AssessmentApi", "NotificationApi"]
