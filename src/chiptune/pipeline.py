"""MIDI file in, chiptune WAV out."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

import numpy as np

from chiptune.config import DEFAULT_TEMPO_BPM, SAMPLE_RATE, TAIL_SECONDS
from chiptune.errors import NoNotesExtracted
from chiptune.midi_parser import read_midi_file
from chiptune.mixer import mix_placed
from chiptune.models import MidiDocument, Note, PlacedBuffer, RenderSummary
from chiptune.notes import assemble_notes, total_duration, validate_tempo
from chiptune.synth import place_note, sample_count
from chiptune.wav import encode_wav

logger = logging.getLogger(__name__)


def default_output_path(midi_path: str | Path) -> Path:
    return Path(midi_path).with_suffix(".wav")


def render_notes(
    notes: list[Note],
    duration: float,
    sample_rate: int = SAMPLE_RATE,
    workers: int | None = None,
) -> np.ndarray:
    """Synthesise every note and mix them into one buffer of ``duration`` seconds.

    With ``workers`` > 1 the notes are rendered on a thread pool; the mix
    still adds them in list order, so the result is identical.
    """
    render = partial(place_note, total_duration=duration, sample_rate=sample_rate)
    placed: list[PlacedBuffer]
    if workers and workers > 1 and len(notes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            placed = list(pool.map(render, notes))
    else:
        placed = [render(n) for n in notes]
    return mix_placed(placed, sample_count(duration, sample_rate))


def render_song(
    document: MidiDocument,
    tempo_bpm: float = DEFAULT_TEMPO_BPM,
    sample_rate: int = SAMPLE_RATE,
    tail_seconds: float = TAIL_SECONDS,
    workers: int | None = None,
) -> tuple[np.ndarray, list[Note], float]:
    """Return ``(mixed samples, notes, duration in seconds)`` for a parsed file.

    Raises:
        InvalidTempo: If ``tempo_bpm`` is not a positive number.
        NoNotesExtracted: If no note-on/note-off pair survives assembly.
    """
    notes = assemble_notes(document, tempo_bpm)
    if not notes:
        raise NoNotesExtracted("No notes found in MIDI file")

    duration = total_duration(notes, tail_seconds)
    logger.info("Total length: %.2f s", duration)
    logger.info("Synthesising %d note(s)...", len(notes))
    return render_notes(notes, duration, sample_rate, workers), notes, duration


def convert_midi_to_wav(
    midi_path: str | Path,
    wav_path: str | Path | None = None,
    tempo_bpm: float = DEFAULT_TEMPO_BPM,
    *,
    sample_rate: int = SAMPLE_RATE,
    tail_seconds: float = TAIL_SECONDS,
    workers: int | None = None,
) -> RenderSummary:
    """Convert a Standard MIDI File to a mono 16-bit WAV.

    Nothing is written unless every stage succeeds.

    Raises:
        InvalidTempo: Checked before the input is opened.
        InputNotFound: If ``midi_path`` does not exist.
        MidiParseError: If the file header or a track header is unreadable.
        NoNotesExtracted: If the file contains no playable notes.
    """
    tempo_bpm = validate_tempo(tempo_bpm)
    out_path = Path(wav_path) if wav_path else default_output_path(midi_path)

    document = read_midi_file(midi_path)
    samples, notes, duration = render_song(
        document, tempo_bpm, sample_rate, tail_seconds, workers
    )
    data = encode_wav(samples, sample_rate)
    out_path.write_bytes(data)
    logger.info("Wrote %s", out_path)

    return RenderSummary(
        document=document,
        note_count=len(notes),
        duration=duration,
        sample_count=len(samples),
        output_path=str(out_path),
    )
