"""Notification sound."""

from artemis_client.sound.chime import render_samples, render_wav
from artemis_client.sound.engine import AudioSink, SoundEngine

__all__ = ["AudioSink", "SoundEngine", "render_samples", "render_wav"]
