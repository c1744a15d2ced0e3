"""Composition root wiring the client's services together.

Every collaborator is created here and handed to its users explicitly; no
module keeps a global connection or client instance.
"""

import structlog

from artemis_client.assessment import AssessmentSessionFlow, InvitationFlow
from artemis_client.auth import Identity
from artemis_client.config import ClientSettings, validate_environment
from artemis_client.notifications import NotificationStore
from artemis_client.realtime import (
    RealtimeChannelManager,
    ReconnectPolicy,
    SocketIOTransport,
    TransportFactory,
)
from artemis_client.services import ApiClient, AssessmentApi, NotificationApi
from artemis_client.sound import AudioSink, SoundEngine
from artemis_client.storage import LocalStorage

logger = structlog.get_logger(__name__)


class ArtemisClient:
    """Notification and assessment client for one signed-in user at a time."""

    def __init__(
        self,
        settings: ClientSettings,
        transport_factory: TransportFactory = SocketIOTransport,
        sound_sink: AudioSink | None = None,
        storage: LocalStorage | None = None,
    ):
        """Initialize client.

        Args:
            settings: Validated client settings
            transport_factory: Creates real-time transports
            sound_sink: Plays the notification chime (None keeps it silent)
            storage: Local preference storage; defaults to settings.storage_path
        """
        self.settings = settings

        self.api_client = ApiClient(settings.api_url, timeout=settings.request_timeout)
        self.notification_api = NotificationApi(self.api_client)
        self.assessment_api = AssessmentApi(self.api_client)

        self.storage = storage or LocalStorage(settings.storage_path)
        self.sound = SoundEngine(storage=self.storage, sink=sound_sink)

        self.notifications = NotificationStore(
            self.notification_api,
            sound=self.sound,
            page_size=settings.notification_page_size,
        )
        self.channel = RealtimeChannelManager(
            settings.api_url,
            self.notifications,
            transport_factory=transport_factory,
            policy=ReconnectPolicy.from_settings(settings),
            connect_timeout=settings.socket_connect_timeout,
        )
        self.notifications.attach_channel(self.channel)

        self.invitations = InvitationFlow(self.assessment_api)
        self._identity: Identity | None = None

    @classmethod
    def from_environment(cls, **kwargs) -> "ArtemisClient":
        """Build a client from ``ARTEMIS_*`` environment variables.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        return cls(validate_environment(), **kwargs)

    @property
    def identity(self) -> Identity | None:
        """The signed-in identity, or None when signed out."""
        return self._identity

    async def set_identity(self, identity: Identity | None) -> None:
        """Switch the signed-in user, or sign out with None.

        Updates REST authentication and brings the real-time channel in line
        with the new identity.
        """
        if identity is None:
            self.api_client.set_auth_token(None)
            self.api_client.set_token_refresher(None)
        else:
            try:
                token = await identity.get_token()
            except Exception as e:
                logger.error("Failed to obtain token for API client", error=str(e))
                token = None
            self.api_client.set_auth_token(token)
            self.api_client.set_token_refresher(identity.get_token)

        self._identity = identity
        await self.channel.sync(identity)

    def session(self, session_id: str) -> AssessmentSessionFlow:
        """Create the flow for one assessment session."""
        return AssessmentSessionFlow(self.assessment_api, session_id)

    async def close(self) -> None:
        """Close the real-time channel."""
        await self.channel.close()

    async def __aenter__(self) -> "ArtemisClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
