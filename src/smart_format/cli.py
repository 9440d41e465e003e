"""Format text files to HTML from the command line.

Usage:
    smart-format notes.txt chat.txt -o out/ --toc
    smart-format scan.txt --local-only --styles styles.json

Each INPUT is written to ``<stem>.html`` next to it, or into the ``-o`` directory.
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from smart_format.pipeline import Formatter
from smart_format.styling.rules import load_overrides

logger = logging.getLogger(__name__)


def output_path(input_path: Path, output_dir: Path | None) -> Path:
    """Where the HTML for *input_path* is written."""
    target_dir = output_dir if output_dir is not None else input_path.parent
    return target_dir / f"{input_path.stem}.html"


def format_files(paths: list[Path], formatter: Formatter, output_dir: Path | None = None, include_toc: bool = False) -> int:
    """Format every file in *paths*; returns the number of failures."""
    failures = 0
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    for path in tqdm(paths, desc="Formatting", unit="file", disable=len(paths) < 2):
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Cannot read %s: %s", path, exc)
            failures += 1
            continue

        result = formatter.format(text, include_toc=include_toc)
        if not result.ok:
            logger.error("%s: %s", path.name, result.status)
            failures += 1
            continue

        destination = output_path(path, output_dir)
        destination.write_text(result.html, encoding="utf-8")
        if result.warning:
            logger.warning("%s: %s", path.name, result.warning)
        logger.info("%s -> %s  [%s, %d elements] %s", path.name, destination, result.classifier, len(result.elements), result.status)

    return failures


def main():
    """Parse arguments and format each input file."""
    parser = argparse.ArgumentParser(description="Turn noisy OCR / AI-chat text into styled HTML")
    parser.add_argument("inputs", nargs="+", type=Path, metavar="INPUT", help="Text file(s) to format")
    parser.add_argument("-o", "--output-dir", type=Path, default=None, help="Directory for the .html output (default: next to each input)")
    parser.add_argument("--local-only", action="store_true", help="Skip the remote AI classifier")
    parser.add_argument("--toc", action="store_true", help="Prepend a table of contents")
    parser.add_argument("--styles", type=Path, default=None, help="JSON file of style overrides, e.g. {\"h1\": {\"font-size\": \"18pt\"}}")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    # Suppress per-request HTTP logs from httpx so they don't clobber the tqdm bar
    logging.getLogger("httpx").setLevel(logging.WARNING)

    overrides = load_overrides(args.styles) if args.styles else None
    formatter = Formatter(overrides=overrides, local_only=args.local_only)

    failures = format_files(args.inputs, formatter, output_dir=args.output_dir, include_toc=args.toc)
    logger.info("Done: %d formatted, %d failed", len(args.inputs) - failures, failures)
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
