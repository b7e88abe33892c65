"""Three-voice demo tone built from the same oscillators as the converter."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from chiptune.config import DEMO_DURATION, DEMO_OUTPUT, SAMPLE_RATE
from chiptune.mixer import mix
from chiptune.models import DutyCycle
from chiptune.synth import generate_square, generate_triangle
from chiptune.wav import write_wav


def render_demo(sample_rate: int = SAMPLE_RATE, duration: float = DEMO_DURATION) -> np.ndarray:
    melody = generate_square(440.0, DutyCycle.DUTY_50, sample_rate, duration) * 0.3
    harmony = generate_square(330.0, DutyCycle.DUTY_25, sample_rate, duration) * 0.25
    bass = generate_triangle(110.0, sample_rate, duration) * 0.4
    return mix([melody, harmony, bass])


def write_demo(path: str | Path = DEMO_OUTPUT, sample_rate: int = SAMPLE_RATE) -> Path:
    return write_wav(path, render_demo(sample_rate), sample_rate)
