"""Notification chime playback and the persisted mute preference."""

from collections.abc import Callable

import structlog

from artemis_client.constants import SOUND_PREFERENCE_KEY
from artemis_client.sound.chime import render_wav
from artemis_client.storage import LocalStorage

logger = structlog.get_logger(__name__)

AudioSink = Callable[[bytes], None]


class SoundEngine:
    """Plays the notification chime when the user allows it.

    The enabled flag lives on this object and is updated synchronously on
    every change, so handlers that hold the engine always read the current
    preference. Playback stays silent until the user has interacted with
    the client, and when no audio sink is configured.
    """

    def __init__(self, storage: LocalStorage | None = None, sink: AudioSink | None = None):
        """Initialize sound engine.

        Args:
            storage: Where the preference is persisted (None keeps it in memory)
            sink: Callable that plays WAV bytes
        """
        self.storage = storage
        self.sink = sink
        self._enabled = self._load_preference()
        self._interacted = False
        self._chime: bytes | None = None

    def _load_preference(self) -> bool:
        if self.storage is None:
            return True
        try:
            stored = self.storage.get_item(SOUND_PREFERENCE_KEY)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read sound preference", error=str(e))
            return True
        # Default: enabled
        return True if stored is None else stored == "true"

    @property
    def enabled(self) -> bool:
        """Whether notification sounds are on."""
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Change and persist the sound preference.

        Persistence failures are logged; the in-memory value still changes.
        """
        self._enabled = enabled
        if self.storage is None:
            return
        try:
            self.storage.set_item(SOUND_PREFERENCE_KEY, "true" if enabled else "false")
        except (OSError, ValueError) as e:
            logger.warning("Failed to persist sound preference", error=str(e))

    def toggle(self) -> bool:
        """Flip the sound preference and return the new value."""
        self.set_enabled(not self._enabled)
        return self._enabled

    def mark_interacted(self) -> None:
        """Record that the user has interacted; playback is allowed afterwards."""
        self._interacted = True

    @property
    def chime(self) -> bytes:
        """WAV bytes of the chime, rendered on first use."""
        if self._chime is None:
            self._chime = render_wav()
        return self._chime

    def play(self) -> bool:
        """Play the chime.

        Returns:
            True if the chime was handed to the sink
        """
        if not self._interacted or self.sink is None:
            return False
        try:
            self.sink(self.chime)
        except Exception as e:
            logger.warning("Failed to play notification sound", error=str(e))
            return False
        return True
