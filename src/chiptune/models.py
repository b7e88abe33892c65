"""Core data models shared across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

import numpy as np


@dataclass(frozen=True)
class NoteOn:
    delta_ticks: int
    channel: int  # 0-15
    note: int  # MIDI note number 0-127
    velocity: int  # 1-127; velocity 0 is decoded as NoteOff


@dataclass(frozen=True)
class NoteOff:
    delta_ticks: int
    channel: int
    note: int


@dataclass(frozen=True)
class ProgramChange:
    delta_ticks: int
    channel: int
    program: int


@dataclass(frozen=True)
class UnknownEvent:
    """Meta, sysex-free channel messages and anything else the parser skips."""

    delta_ticks: int


RawMidiEvent = Union[NoteOn, NoteOff, ProgramChange, UnknownEvent]


@dataclass
class Track:
    events: list[RawMidiEvent] = field(default_factory=list)


@dataclass
class MidiDocument:
    """Parsed representation of a Standard MIDI File."""

    format: int
    track_count: int
    ticks_per_quarter: int
    tracks: list[Track] = field(default_factory=list)


@dataclass(frozen=True)
class Note:
    """A resolved note-on/note-off pair."""

    midi_note: int
    channel: int
    start_time: float  # seconds from song start
    duration: float  # seconds, always > 0
    velocity: int

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class DutyCycle(Enum):
    """Pulse widths offered by the square channels."""

    DUTY_12_5 = 0.125
    DUTY_25 = 0.25
    DUTY_50 = 0.5
    DUTY_75 = 0.75


class Voice(Enum):
    """The four voices of the emulated chip."""

    PULSE_50 = auto()
    PULSE_25 = auto()
    TRIANGLE = auto()
    NOISE = auto()

    @classmethod
    def for_channel(cls, channel: int) -> Voice:
        return _CHANNEL_VOICES[channel % 4]


_CHANNEL_VOICES = (Voice.PULSE_50, Voice.PULSE_25, Voice.TRIANGLE, Voice.NOISE)


@dataclass
class PlacedBuffer:
    """A volume-scaled note waveform anchored at a sample offset.

    Equivalent to a buffer of the full piece length that is silent outside
    ``[offset, offset + len(samples))``.
    """

    offset: int
    samples: np.ndarray

    @property
    def end(self) -> int:
        return self.offset + len(self.samples)

    def to_dense(self, length: int) -> np.ndarray:
        out = np.zeros(length, dtype=np.float64)
        stop = min(self.end, length)
        if stop > self.offset:
            out[self.offset:stop] = self.samples[: stop - self.offset]
        return out


@dataclass
class RenderSummary:
    """What a conversion produced."""

    document: MidiDocument
    note_count: int
    duration: float  # seconds, including the trailing silence
    sample_count: int
    output_path: str = ""
