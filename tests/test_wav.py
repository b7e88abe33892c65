"""Tests for PCM quantisation and WAV encoding."""

import struct
import wave

import numpy as np

from chiptune.wav import HEADER_SIZE, WaveHeader, encode_wav, to_pcm16, write_wav


def test_pcm_full_scale_and_zero():
    assert to_pcm16(np.array([1.0, -1.0, 0.0])).tolist() == [32767, -32767, 0]


def test_pcm_clamps_out_of_range():
    assert to_pcm16(np.array([2.5, -3.0])).tolist() == [32767, -32767]


def test_pcm_truncates_toward_zero():
    # 0.5 * 32767 = 16383.5
    assert to_pcm16(np.array([0.5, -0.5])).tolist() == [16383, -16383]
    assert to_pcm16(np.array([0.99999])).tolist() == [32766]


def test_pcm_nan_is_silence():
    assert to_pcm16(np.array([np.nan])).tolist() == [0]


def test_header_layout():
    data = encode_wav(np.array([0.0, 0.5, -1.0]), 44100)
    assert len(data) == HEADER_SIZE + 6
    fields = struct.unpack("<4sI4s4sIHHIIHH4sI", data[:44])
    assert fields == (
        b"RIFF", 36 + 6, b"WAVE",
        b"fmt ", 16, 1, 1, 44100, 88200, 2, 16,
        b"data", 6,
    )


def test_samples_little_endian():
    data = encode_wav(np.array([1.0, -1.0]), 8000)
    assert data[44:] == struct.pack("<hh", 32767, -32767)


def test_header_for_pcm():
    header = WaveHeader.for_pcm(1000, sample_rate=22050)
    assert header.data_size == 2000
    assert header.chunk_size == 2036
    assert header.byte_rate == 44100
    assert header.block_align == 2
    assert WaveHeader.unpack(header.pack()) == header


def test_empty_buffer():
    data = encode_wav(np.zeros(0))
    assert len(data) == 44
    assert WaveHeader.unpack(data).data_size == 0


def test_written_file_reads_back_with_wave_module(tmp_path):
    path = write_wav(tmp_path / "out.wav", np.linspace(-1.0, 1.0, 441), 44100)
    with wave.open(str(path), "rb") as wf:
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == 44100
        assert wf.getnframes() == 441
        frames = wf.readframes(441)
    pcm = np.frombuffer(frames, dtype="<i2")
    assert pcm[0] == -32767
    assert pcm[-1] == 32767
