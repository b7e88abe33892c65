"""16-bit PCM quantisation and canonical RIFF/WAVE output.

Layout written (all integers little-endian)::

    RIFF <chunk size> WAVE
    "fmt " 16 <format=1> <channels> <rate> <byte rate> <block align> <bits>
    "data" <data size> <samples...>
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from chiptune.config import BITS_PER_SAMPLE, NUM_CHANNELS, PCM_MAX, SAMPLE_RATE
from chiptune.errors import ChiptuneError

logger = logging.getLogger(__name__)

_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")
HEADER_SIZE = _HEADER_STRUCT.size  # 44
_PCM_FORMAT = 1
_FMT_CHUNK_SIZE = 16


@dataclass(frozen=True)
class WaveHeader:
    sample_rate: int
    num_channels: int
    bits_per_sample: int
    data_size: int  # bytes of sample data following the header
    audio_format: int = _PCM_FORMAT

    @classmethod
    def for_pcm(
        cls,
        sample_count: int,
        sample_rate: int = SAMPLE_RATE,
        num_channels: int = NUM_CHANNELS,
        bits_per_sample: int = BITS_PER_SAMPLE,
    ) -> WaveHeader:
        block_align = num_channels * bits_per_sample // 8
        return cls(
            sample_rate=sample_rate,
            num_channels=num_channels,
            bits_per_sample=bits_per_sample,
            data_size=sample_count * block_align,
        )

    @property
    def block_align(self) -> int:
        return self.num_channels * self.bits_per_sample // 8

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    @property
    def chunk_size(self) -> int:
        return 36 + self.data_size

    def pack(self) -> bytes:
        return _HEADER_STRUCT.pack(
            b"RIFF",
            self.chunk_size,
            b"WAVE",
            b"fmt ",
            _FMT_CHUNK_SIZE,
            self.audio_format,
            self.num_channels,
            self.sample_rate,
            self.byte_rate,
            self.block_align,
            self.bits_per_sample,
            b"data",
            self.data_size,
        )

    @classmethod
    def unpack(cls, data: bytes) -> WaveHeader:
        """Parse the 44-byte canonical header at the start of ``data``."""
        if len(data) < HEADER_SIZE:
            raise ChiptuneError(f"WAV header needs {HEADER_SIZE} bytes, got {len(data)}")
        (riff, _chunk_size, wave, fmt, fmt_size, audio_format, channels,
         rate, _byte_rate, _align, bits, data_id, data_size) = _HEADER_STRUCT.unpack_from(data)
        if (riff, wave, fmt, data_id) != (b"RIFF", b"WAVE", b"fmt ", b"data") or fmt_size != 16:
            raise ChiptuneError("Not a canonical PCM WAV header")
        return cls(
            sample_rate=rate,
            num_channels=channels,
            bits_per_sample=bits,
            data_size=data_size,
            audio_format=audio_format,
        )


def to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Clamp to [-1, 1], scale by 32767 and truncate toward zero.

    Output range is [-32767, 32767]; -32768 is never produced.
    """
    clamped = np.clip(np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0), -1.0, 1.0)
    return (clamped * PCM_MAX).astype(np.int16)


def encode_wav(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Complete mono 16-bit WAV file contents for ``samples``."""
    pcm = to_pcm16(samples)
    header = WaveHeader.for_pcm(len(pcm), sample_rate)
    return header.pack() + pcm.astype("<i2").tobytes()


def write_wav(path: str | Path, samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> Path:
    path = Path(path)
    data = encode_wav(samples, sample_rate)
    path.write_bytes(data)
    logger.info("Wrote %s (%d samples, %d bytes)", path, len(samples), len(data))
    return path
