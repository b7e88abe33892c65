"""Entry point for `python -m chiptune` or the `midi2chiptune` console script."""

from __future__ import annotations

import argparse
import logging
import sys

from chiptune.config import DEFAULT_TEMPO_BPM, DEMO_OUTPUT
from chiptune.errors import ChiptuneError

logger = logging.getLogger("chiptune")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _init_logging(verbose: bool) -> None:
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=_LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="midi2chiptune",
        description="Render a MIDI file as a 4-voice chiptune WAV",
    )
    parser.add_argument("input", nargs="?", help="Standard MIDI File to convert")
    parser.add_argument("output", nargs="?", help="WAV file to write (default: INPUT with .wav)")
    parser.add_argument(
        "tempo", nargs="?", type=float, default=DEFAULT_TEMPO_BPM,
        help=f"Tempo in BPM (default: {DEFAULT_TEMPO_BPM})",
    )
    parser.add_argument("--workers", type=int, default=None, help="Render notes on N threads")
    parser.add_argument(
        "--demo-output", default=DEMO_OUTPUT,
        help="Where the demo tone goes when no INPUT is given",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _init_logging(args.verbose)

    if not args.input:
        from chiptune.demo import write_demo

        logger.info("No input given; writing demo tone")
        write_demo(args.demo_output)
        return 0

    from chiptune.pipeline import convert_midi_to_wav

    try:
        summary = convert_midi_to_wav(
            args.input, args.output, args.tempo, workers=args.workers
        )
    except ChiptuneError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("I/O error: %s", exc)
        return 1

    logger.info(
        "Done: %d note(s), %.2f s -> %s",
        summary.note_count, summary.duration, summary.output_path,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
