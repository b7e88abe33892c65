"""Turn raw track events into timed notes."""

from __future__ import annotations

import logging
import math

from chiptune.config import TAIL_SECONDS
from chiptune.errors import InvalidTempo
from chiptune.models import MidiDocument, Note, NoteOff, NoteOn, Track

logger = logging.getLogger(__name__)


def validate_tempo(tempo_bpm: float) -> float:
    """Return ``tempo_bpm`` as a float, rejecting values that break timing."""
    try:
        bpm = float(tempo_bpm)
    except (TypeError, ValueError) as exc:
        raise InvalidTempo(f"Tempo must be a number, got {tempo_bpm!r}") from exc
    if not math.isfinite(bpm) or bpm <= 0:
        raise InvalidTempo(f"Tempo must be greater than zero, got {tempo_bpm!r}")
    return bpm


def ticks_to_seconds(ticks: int, ticks_per_quarter: int, tempo_bpm: float) -> float:
    return ticks / ticks_per_quarter * 60.0 / tempo_bpm


def assemble_notes(document: MidiDocument, tempo_bpm: float) -> list[Note]:
    """Pair note-ons with note-offs, track by track, at a fixed tempo.

    Notes are returned in the order they close, track after track; the list
    is not sorted by start time.
    """
    bpm = validate_tempo(tempo_bpm)
    notes: list[Note] = []
    for track in document.tracks:
        notes.extend(_assemble_track(track, document.ticks_per_quarter, bpm))
    logger.info("Found %d note(s)", len(notes))
    return notes


def _assemble_track(track: Track, ticks_per_quarter: int, tempo_bpm: float) -> list[Note]:
    tick = 0
    pending: dict[tuple[int, int], tuple[int, float]] = {}  # (channel, note) -> (velocity, start)
    notes: list[Note] = []

    for event in track.events:
        tick += event.delta_ticks
        now = ticks_to_seconds(tick, ticks_per_quarter, tempo_bpm)

        if isinstance(event, NoteOn):
            # A re-trigger replaces the pending start; only the newest one closes.
            pending[(event.channel, event.note)] = (event.velocity, now)
        elif isinstance(event, NoteOff):
            opened = pending.pop((event.channel, event.note), None)
            if opened is None:
                continue
            velocity, start = opened
            duration = now - start
            if duration > 0:
                notes.append(
                    Note(
                        midi_note=event.note,
                        channel=event.channel,
                        start_time=start,
                        duration=duration,
                        velocity=velocity,
                    )
                )

    if pending:
        logger.debug("Dropped %d note-on(s) without a matching note-off", len(pending))
    return notes


def total_duration(notes: list[Note], tail_seconds: float = TAIL_SECONDS) -> float:
    """Length of the rendered piece: last note end plus trailing silence."""
    if not notes:
        return 0.0
    return max(n.end_time for n in notes) + tail_seconds
