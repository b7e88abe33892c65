"""Helpers for building Standard MIDI File bytes in tests."""

from __future__ import annotations

import io
import struct

import mido


def header_chunk(track_count: int, ticks_per_quarter: int = 480, fmt: int = 1) -> bytes:
    return b"MThd" + struct.pack(">IHHH", 6, fmt, track_count, ticks_per_quarter)


def track_chunk(body: bytes) -> bytes:
    return b"MTrk" + struct.pack(">I", len(body)) + body


def build_smf(*bodies: bytes, ticks_per_quarter: int = 480) -> bytes:
    """A complete file with one MTrk chunk per body."""
    return header_chunk(len(bodies), ticks_per_quarter) + b"".join(
        track_chunk(body) for body in bodies
    )


END_OF_TRACK = b"\x00\xff\x2f\x00"


def mido_bytes(*tracks: list[mido.Message], ticks_per_quarter: int = 480) -> bytes:
    """Serialize messages with mido (which writes running status)."""
    mid = mido.MidiFile(type=1, ticks_per_beat=ticks_per_quarter)
    for messages in tracks:
        track = mido.MidiTrack()
        track.extend(messages)
        mid.tracks.append(track)
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()
