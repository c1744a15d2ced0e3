"""Synthesis of the two-tone notification chime.

The chime is E5 then G5 (a major third), each a sine tone with a quick
linear attack and a smooth exponential decay, rendered to 16-bit mono WAV.
"""

import io
import math
import sys
import wave
from array import array

SAMPLE_RATE = 44100

# (frequency Hz, duration s, start offset s)
CHIME_NOTES = [
    (659.25, 0.12, 0.0),
    (783.99, 0.18, 0.12),
]

PEAK_GAIN = 0.15
FLOOR_GAIN = 0.001
ATTACK_SECONDS = 0.01
DECAY_TAIL_SECONDS = 0.25
STOP_TAIL_SECONDS = 0.3


def _envelope(t: float, duration: float) -> float:
    """Gain at time t (seconds since note start)."""
    if t < ATTACK_SECONDS:
        return PEAK_GAIN * t / ATTACK_SECONDS
    decay_end = duration + DECAY_TAIL_SECONDS
    if t >= decay_end:
        return FLOOR_GAIN
    progress = (t - ATTACK_SECONDS) / (decay_end - ATTACK_SECONDS)
    return PEAK_GAIN * (FLOOR_GAIN / PEAK_GAIN) ** progress


def render_samples(sample_rate: int = SAMPLE_RATE) -> list[float]:
    """Render the chime as floating-point samples in [-1, 1]."""
    total_seconds = max(start + duration + STOP_TAIL_SECONDS for _, duration, start in CHIME_NOTES)
    samples = [0.0] * int(math.ceil(total_seconds * sample_rate))

    for frequency, duration, start in CHIME_NOTES:
        first = int(start * sample_rate)
        last = min(len(samples), int((start + duration + STOP_TAIL_SECONDS) * sample_rate))
        for i in range(first, last):
            t = (i - first) / sample_rate
            samples[i] += math.sin(2 * math.pi * frequency * t) * _envelope(t, duration)

    return [max(-1.0, min(1.0, s)) for s in samples]


def render_wav(sample_rate: int = SAMPLE_RATE) -> bytes:
    """Render the chime as a 16-bit mono WAV file."""
    pcm = array("h", (int(s * 32767) for s in render_samples(sample_rate)))
    if sys.byteorder == "big":
        pcm.byteswap()
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return buffer.getvalue()
