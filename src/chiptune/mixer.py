"""Sum note buffers into a single master buffer."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from chiptune.models import PlacedBuffer


def mix(buffers: Sequence[np.ndarray]) -> np.ndarray:
    """Average buffers sample by sample.

    The result is as long as the longest input; shorter inputs count as
    silence past their end. Every sample is divided by the total number of
    buffers, not by how many of them are sounding at that instant.
    """
    if not buffers:
        return np.zeros(0, dtype=np.float64)
    out = np.zeros(max(len(b) for b in buffers), dtype=np.float64)
    for buf in buffers:
        out[: len(buf)] += buf
    return out / len(buffers)


def mix_placed(buffers: Sequence[PlacedBuffer], length: int | None = None) -> np.ndarray:
    """Same as :func:`mix` over the dense form of each placed buffer.

    ``length`` defaults to the furthest buffer end; samples beyond it are
    dropped.
    """
    if length is None:
        length = max((b.end for b in buffers), default=0)
    out = np.zeros(length, dtype=np.float64)
    if not buffers:
        return out
    for buf in buffers:
        stop = min(buf.end, length)
        if stop > buf.offset:
            out[buf.offset:stop] += buf.samples[: stop - buf.offset]
    return out / len(buffers)
