"""Exception hierarchy for chiptune."""

from __future__ import annotations


class ChiptuneError(Exception):
    """Base exception for all chiptune errors."""


class MidiParseError(ChiptuneError):
    """The input could not be read as a Standard MIDI File."""


class InvalidHeader(MidiParseError):
    """A chunk id or header field does not match the SMF layout."""


class UnexpectedEndOfData(MidiParseError):
    """A read ran past the end of the buffer."""

    def __init__(self, position: int, wanted: int, end: int) -> None:
        super().__init__(
            f"unexpected end of data at offset {position}: "
            f"wanted {wanted} byte(s), readable range ends at {end}"
        )
        self.position = position
        self.wanted = wanted
        self.end = end


class InvalidTempo(ChiptuneError, ValueError):
    """Tempo must be a finite number of beats per minute above zero."""


class NoNotesExtracted(ChiptuneError):
    """The file parsed but produced no playable notes."""


class InputNotFound(ChiptuneError, FileNotFoundError):
    """The input MIDI file does not exist."""
