"""Command-line interface for Focus Reader.

WHY: A reader needs a way to try a document without a web front end,
and an author needs to check what the structurer made of a text. The CLI
wires the structuring pipeline, the pluggable formatters and the
playback engine behind two subcommands.

HOW: argparse with two subcommands. ``structure`` runs the pipeline and
saves the selected formatter outputs next to the input (or to
--output-dir). ``read`` structures the text and plays it in the terminal
with the asyncio PlaybackRunner via asyncio.run(). Status messages go to
stderr; the word stream goes to stdout.

RULES:
- Positional argument: input text file path (UTF-8)
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-outline-2.txt)
- --wpm is clamped into the pacing bounds, never rejected
- Ctrl-C during ``read`` stops the session and exits with status 130
- StructuringError → message on stderr, exit status 1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from focus_reader.config import DEFAULT_WPM, LOG_LEVEL, configure_logging
from focus_reader.core.assembler import DEFAULT_TITLE, structure
from focus_reader.core.ir import DocumentStructure
from focus_reader.errors import FocusReaderError, StructuringError
from focus_reader.formatters import FORMATTERS
from focus_reader.formatters.base import BaseFormatter, FormatterOutput
from focus_reader.formatters.timeline import TimelineFormatter, highlight_orp
from focus_reader.playback.engine import PlaybackEngine, PlaybackState
from focus_reader.playback.events import SectionBoundaryCrossed, SessionEnded, WordDisplayed
from focus_reader.playback.runner import PlaybackRunner

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return a path that does not exist yet.

    First attempt is {stem}{suffix}; on conflict a counter starting at 2
    is inserted before the extension: essay-outline.txt → essay-outline-2.txt.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_format_keys(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    return keys


def _make_formatter(key: str, wpm: Optional[int]) -> BaseFormatter:
    if key == "timeline":
        return TimelineFormatter(wpm=wpm)
    return FORMATTERS[key]()


def _load_document(input_file: str, title: Optional[str]) -> DocumentStructure:
    """Read and structure the input file, exiting on unusable input."""
    input_path = Path(input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    raw_text = input_path.read_text(encoding="utf-8")
    try:
        document = structure(raw_text, title or input_path.stem or DEFAULT_TITLE)
    except StructuringError as e:
        _fail(str(e))

    _status("Structured '{}': {} words, {} sections".format(
        document.title, document.total_words, len(document.sections),
    ))
    return document


# ---------------------------------------------------------------------------
# structure
# ---------------------------------------------------------------------------


def run_structure(args: argparse.Namespace) -> List[Path]:
    """Structure the input and save every selected formatter output."""
    input_path = Path(args.input_file).resolve()
    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    format_keys = _parse_format_keys(args.formats)
    document = _load_document(args.input_file, args.title)

    saved_files: List[Path] = []
    for key in format_keys:
        formatter = _make_formatter(key, args.wpm)
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(document):
            saved_path = _save_output(output, input_path.stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


# ---------------------------------------------------------------------------
# read
# ---------------------------------------------------------------------------


async def _play(engine: PlaybackEngine, document: DocumentStructure, args: argparse.Namespace) -> None:
    def _show_word(event: WordDisplayed) -> None:
        print(highlight_orp(event.word, event.orp), flush=True)

    def _show_section(event: SectionBoundaryCrossed) -> None:
        _status("-- end of section: {} --".format(document.sections[event.section_index].title))

    def _show_end(event: SessionEnded) -> None:
        _status("Finished '{}'.".format(document.title))

    engine.subscribe(_show_word, WordDisplayed)
    engine.subscribe(_show_section, SectionBoundaryCrossed)
    engine.subscribe(_show_end, SessionEnded)

    engine.start_reading(document, args.start)
    if args.wpm is not None:
        engine.set_speed(args.wpm)
    _status("Reading at {} wpm (Ctrl-C to stop)".format(engine.current_speed))

    runner = PlaybackRunner(engine)
    try:
        await runner.play()
    finally:
        runner.close()


def run_read(args: argparse.Namespace) -> None:
    """Play the input in the terminal until completion or Ctrl-C."""
    document = _load_document(args.input_file, args.title)
    engine = PlaybackEngine()

    try:
        asyncio.run(_play(engine, document, args))
    except KeyboardInterrupt:
        position = engine.current_position
        if engine.state in (PlaybackState.READING, PlaybackState.PAUSED, PlaybackState.COMPLETED):
            engine.stop_reading()
        _status("\nStopped at word {} of {}.".format(position, document.total_words))
        sys.exit(130)
    except FocusReaderError as e:
        _fail(str(e))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser; kept separate from main() for tests."""
    parser = argparse.ArgumentParser(
        prog="focus-reader",
        description="Structure plain text for RSVP reading and play it one word at a time.",
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        help="Logging level (default: %(default)s).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    structure_parser = subparsers.add_parser(
        "structure",
        help="Structure a text file and save the selected output formats.",
    )
    structure_parser.add_argument("input_file", help="Path to a UTF-8 text file.")
    structure_parser.add_argument("--title", default=None, help="Document title (default: file stem).")
    structure_parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    structure_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    structure_parser.add_argument(
        "--wpm",
        type=int,
        default=None,
        help="Reading speed for the timeline output (default: {}).".format(DEFAULT_WPM),
    )
    structure_parser.set_defaults(func=run_structure)

    read_parser = subparsers.add_parser("read", help="Read a text file in the terminal.")
    read_parser.add_argument("input_file", help="Path to a UTF-8 text file.")
    read_parser.add_argument("--title", default=None, help="Document title (default: file stem).")
    read_parser.add_argument(
        "--wpm",
        type=int,
        default=None,
        help="Reading speed in words per minute (default: {}).".format(DEFAULT_WPM),
    )
    read_parser.add_argument(
        "--start",
        type=int,
        default=0,
        help="Word index to start from (clamped into the document).",
    )
    read_parser.set_defaults(func=run_read)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``focus-reader`` and ``python -m focus_reader``.

    argv=None means use sys.argv; explicit argv is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())
    args.func(args)


if __name__ == "__main__":
    main()
