"""Standard MIDI File reader: header chunk, track chunks and raw events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from chiptune.cursor import ByteCursor
from chiptune.errors import InputNotFound, InvalidHeader, UnexpectedEndOfData
from chiptune.models import (
    MidiDocument,
    NoteOff,
    NoteOn,
    ProgramChange,
    RawMidiEvent,
    Track,
    UnknownEvent,
)

logger = logging.getLogger(__name__)

HEADER_ID = b"MThd"
TRACK_ID = b"MTrk"
HEADER_LENGTH = 6

_NOTE_OFF = 0x80
_NOTE_ON = 0x90
_PROGRAM_CHANGE = 0xC0
_META = 0xFF


@dataclass
class TrackParseState:
    """Per-track parse context; never shared between tracks."""

    running_status: int = 0
    recovered_bytes: int = 0


def read_midi_file(path: str | Path) -> MidiDocument:
    """Read and parse a .mid file.

    Raises:
        InputNotFound: If ``path`` does not exist.
        MidiParseError: If the header or a track header cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFound(f"MIDI file not found: {path}")
    return parse_midi_bytes(path.read_bytes())


def parse_midi_bytes(data: bytes) -> MidiDocument:
    """Parse a complete Standard MIDI File held in memory."""
    cursor = ByteCursor(data)
    fmt, track_count, ticks_per_quarter = _read_header(cursor)

    tracks: list[Track] = []
    for index in range(track_count):
        tracks.append(_read_track(cursor, index))

    document = MidiDocument(
        format=fmt,
        track_count=track_count,
        ticks_per_quarter=ticks_per_quarter,
        tracks=tracks,
    )
    logger.info(
        "Loaded MIDI: format %d, %d track(s), %d ticks/quarter",
        fmt, track_count, ticks_per_quarter,
    )
    return document


def _read_header(cursor: ByteCursor) -> tuple[int, int, int]:
    chunk_id = cursor.read_bytes(4)
    if chunk_id != HEADER_ID:
        raise InvalidHeader(f"Expected {HEADER_ID!r} header chunk, found {chunk_id!r}")

    length = cursor.read_u32_be()
    if length < HEADER_LENGTH:
        raise InvalidHeader(f"Header chunk length {length} is shorter than {HEADER_LENGTH}")

    fmt = cursor.read_u16_be()
    track_count = cursor.read_u16_be()
    division = cursor.read_u16_be()
    cursor.skip(length - HEADER_LENGTH)

    if division <= 0:
        raise InvalidHeader("Ticks per quarter note must be greater than zero")
    if division & 0x8000:
        logger.warning("SMPTE time division 0x%04X is read as ticks per quarter", division)
    return fmt, track_count, division


def _read_track(cursor: ByteCursor, index: int) -> Track:
    chunk_id = cursor.read_bytes(4)
    if chunk_id != TRACK_ID:
        raise InvalidHeader(
            f"Expected {TRACK_ID!r} chunk for track {index}, found {chunk_id!r}"
        )
    length = cursor.read_u32_be()
    body = cursor.window(length)
    end_position = cursor.position + length

    track = Track(events=_read_events(body))
    cursor.seek(end_position)
    logger.debug("Track %d: %d event(s) in %d byte(s)", index, len(track.events), length)
    return track


def _read_events(body: ByteCursor) -> list[RawMidiEvent]:
    """Parse events until the track body is exhausted.

    An event that cannot be read is abandoned and scanning restarts one
    byte after where that event began.
    """
    state = TrackParseState()
    events: list[RawMidiEvent] = []

    while body.has_more():
        start = body.position
        try:
            event = parse_event(body, state)
        except UnexpectedEndOfData as exc:
            logger.debug("Skipping byte at offset %d: %s", start, exc)
            state.recovered_bytes += 1
            body.seek(start + 1)
            continue
        if not isinstance(event, UnknownEvent):
            events.append(event)

    if state.recovered_bytes:
        logger.warning("Skipped %d malformed byte(s) while reading track", state.recovered_bytes)
    return events


def parse_event(cursor: ByteCursor, state: TrackParseState) -> RawMidiEvent:
    """Read one delta time and one event, honouring running status.

    ``state.running_status`` is only updated once the whole event has been
    read, so a failed attempt leaves the parse context untouched.
    """
    delta = cursor.read_vlq()

    status = state.running_status
    first = cursor.peek_u8()
    if first & 0x80:
        status = first
        cursor.skip(1)

    kind = status & 0xF0
    channel = status & 0x0F

    if kind == _NOTE_ON:
        note = cursor.read_u8()
        velocity = cursor.read_u8()
        event: RawMidiEvent
        if velocity == 0:
            event = NoteOff(delta_ticks=delta, channel=channel, note=note)
        else:
            event = NoteOn(delta_ticks=delta, channel=channel, note=note, velocity=velocity)
    elif kind == _NOTE_OFF:
        note = cursor.read_u8()
        cursor.skip(1)  # release velocity
        event = NoteOff(delta_ticks=delta, channel=channel, note=note)
    elif kind == _PROGRAM_CHANGE:
        event = ProgramChange(delta_ticks=delta, channel=channel, program=cursor.read_u8())
    else:
        _skip_event_body(cursor, status)
        event = UnknownEvent(delta_ticks=delta)

    state.running_status = status
    return event


def _skip_event_body(cursor: ByteCursor, status: int) -> None:
    if status == _META:
        cursor.skip(1)  # meta type
        cursor.skip(cursor.read_vlq())
    elif status >= 0x80:
        cursor.skip(1)
        # 0xC0/0xD0 families carry a single data byte
        if status & 0xE0 not in (0xC0, 0xD0):
            cursor.skip(1)
