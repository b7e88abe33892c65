"""Chip-style oscillators and per-note waveform rendering.

All generators are pure functions of their arguments: the same call always
returns the same samples, which keeps rendered files bit-reproducible.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from chiptune.config import (
    A4_FREQUENCY,
    A4_MIDI_NOTE,
    LFSR_SEED,
    LFSR_WIDTH,
    MASTER_VOLUME,
    MAX_VELOCITY,
    SAMPLE_RATE,
)
from chiptune.models import DutyCycle, Note, PlacedBuffer, Voice

# Bit XORed with bit 0 to form the noise feedback
_LONG_TAP = 1
_SHORT_TAP = 6


def midi_note_to_frequency(midi_note: int) -> float:
    """Equal-tempered frequency in Hz, A4 (MIDI 69) = 440 Hz."""
    return A4_FREQUENCY * 2.0 ** ((midi_note - A4_MIDI_NOTE) / 12.0)


def note_volume(velocity: int) -> float:
    return velocity / MAX_VELOCITY * MASTER_VOLUME


def sample_count(duration: float, sample_rate: int = SAMPLE_RATE) -> int:
    return max(0, int(duration * sample_rate))


def _phase(frequency: float, sample_rate: int, n: int) -> np.ndarray:
    """Fractional position within the period for each of ``n`` samples."""
    t = np.arange(n, dtype=np.float64) / sample_rate
    return np.mod(t * frequency, 1.0)


def generate_square(
    frequency: float,
    duty: DutyCycle | float = DutyCycle.DUTY_50,
    sample_rate: int = SAMPLE_RATE,
    duration: float = 1.0,
) -> np.ndarray:
    """Pulse wave: +1.0 for the first ``duty`` of each period, -1.0 after."""
    width = duty.value if isinstance(duty, DutyCycle) else float(duty)
    phase = _phase(frequency, sample_rate, sample_count(duration, sample_rate))
    return np.where(phase < width, 1.0, -1.0)


def generate_triangle(
    frequency: float,
    sample_rate: int = SAMPLE_RATE,
    duration: float = 1.0,
) -> np.ndarray:
    """Linear ramp from -1 up to +1 at half period and back down."""
    phase = _phase(frequency, sample_rate, sample_count(duration, sample_rate))
    return np.where(phase < 0.5, 4.0 * phase - 1.0, 3.0 - 4.0 * phase)


@lru_cache(maxsize=None)
def _lfsr_cycle(tap: int) -> np.ndarray:
    """One full period of the noise register's output, starting from the seed."""
    register = LFSR_SEED
    out: list[float] = []
    while True:
        bit0 = register & 1
        feedback = bit0 ^ ((register >> tap) & 1)
        register = (register >> 1) | (feedback << (LFSR_WIDTH - 1))
        out.append(1.0 if bit0 else -1.0)
        if register == LFSR_SEED:
            break
    cycle = np.array(out, dtype=np.float64)
    cycle.flags.writeable = False
    return cycle


def generate_noise(
    sample_rate: int = SAMPLE_RATE,
    duration: float = 1.0,
    short: bool = False,
) -> np.ndarray:
    """Binary pseudo-random noise from a 15-bit LFSR reseeded on every call.

    The long mode taps bit 1, the short (metallic) mode taps bit 6.
    """
    cycle = _lfsr_cycle(_SHORT_TAP if short else _LONG_TAP)
    n = sample_count(duration, sample_rate)
    return np.tile(cycle, -(-n // len(cycle)))[:n]


def generate_voice(
    voice: Voice,
    frequency: float,
    sample_rate: int = SAMPLE_RATE,
    duration: float = 1.0,
) -> np.ndarray:
    if voice is Voice.PULSE_50:
        return generate_square(frequency, DutyCycle.DUTY_50, sample_rate, duration)
    if voice is Voice.PULSE_25:
        return generate_square(frequency, DutyCycle.DUTY_25, sample_rate, duration)
    if voice is Voice.TRIANGLE:
        return generate_triangle(frequency, sample_rate, duration)
    return generate_noise(sample_rate, duration)


def note_to_waveform(note: Note, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Unscaled waveform for a note, on the voice picked by its channel."""
    return generate_voice(
        Voice.for_channel(note.channel),
        midi_note_to_frequency(note.midi_note),
        sample_rate,
        note.duration,
    )


def place_note(
    note: Note,
    total_duration: float,
    sample_rate: int = SAMPLE_RATE,
) -> PlacedBuffer:
    """Render a note at its start sample, scaled by velocity.

    Samples that would fall past ``total_duration`` are cut off.
    """
    start = sample_count(note.start_time, sample_rate)
    total = sample_count(total_duration, sample_rate)
    length = max(0, min(sample_count(note.duration, sample_rate), total - start))
    waveform = note_to_waveform(note, sample_rate)
    return PlacedBuffer(offset=start, samples=waveform[:length] * note_volume(note.velocity))


def embed_note(
    note: Note,
    total_duration: float,
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """The note on a silent buffer spanning the whole piece."""
    placed = place_note(note, total_duration, sample_rate)
    return placed.to_dense(sample_count(total_duration, sample_rate))
