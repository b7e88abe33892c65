"""Global constants and default settings."""

SAMPLE_RATE = 44100
DEFAULT_TEMPO_BPM = 120.0

# Equal temperament reference (A4 = MIDI 69 = 440 Hz)
A4_FREQUENCY = 440.0
A4_MIDI_NOTE = 69

# Peak amplitude of a full-velocity note before mixing
MASTER_VOLUME = 0.7
MAX_VELOCITY = 127

# Silence appended after the last note ends (seconds)
TAIL_SECONDS = 1.0

# 16-bit PCM output
PCM_MAX = 32767
BITS_PER_SAMPLE = 16
NUM_CHANNELS = 1

# Noise channel shift register
LFSR_SEED = 1
LFSR_WIDTH = 15

# Demo tone (three voices over two seconds)
DEMO_OUTPUT = "demo_nes_sound.wav"
DEMO_DURATION = 2.0
