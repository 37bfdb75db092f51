#!/usr/bin/env python3
"""
Extract embedded images from PDFs.

Every non-hidden *.pdf under the given paths (default: the current
directory) gets a sibling directory holding its distinct images as
p<page>_i<index>.png.

Examples:
  eximgpdf
  eximgpdf scans/ report.pdf --progress
  python -m eximgpdf ~/papers -l DEBUG
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from tqdm.contrib.logging import logging_redirect_tqdm

from . import __version__, config
from .errors import EximgpdfError
from .extract import extract_images_from_files, mupdf_log, quiet_mupdf
from .paths import collect_files, reduce_roots

log = logging.getLogger("eximgpdf")

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Summary:
    files: int = 0
    images: int = 0


def extract_images(paths: Sequence[str], *, progress: bool = False) -> Summary:
    """Reduce `paths` to roots, collect the PDFs under them and process each in order."""
    if not paths:
        paths = [os.getcwd()]

    roots = reduce_roots(paths)
    files: List[Path] = collect_files(roots)
    log.debug("%d root(s), %d pdf(s)", len(roots), len(files))

    results = extract_images_from_files(files, progress=progress)
    return Summary(files=len(results), images=sum(len(v) for v in results.values()))


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="eximgpdf",
        description="Extract embedded images from PDF files into deduplicated PNGs.",
    )
    parser.add_argument("paths", nargs="*", help="Files or directories to scan (default: current directory).")
    parser.add_argument("-l", "--log-level", type=str.upper, choices=LEVELS, default=config.LOG_LEVEL,
                        help="Log level for this tool.")
    parser.add_argument("--pdf-log-level", type=str.upper, choices=LEVELS, default=config.PDF_LOG_LEVEL,
                        help="Log level for messages from the PDF library.")
    parser.add_argument("--progress", action=argparse.BooleanOptionalAction, default=config.PROGRESS,
                        help="Show a progress bar over the PDFs (--no-progress to hide it).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def configure_logging(level: str, pdf_level: str) -> None:
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    log.setLevel(level)
    mupdf_log.setLevel(pdf_level)
    quiet_mupdf()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.pdf_log_level)

    try:
        if args.progress:
            with logging_redirect_tqdm():
                summary = extract_images(args.paths, progress=True)
        else:
            summary = extract_images(args.paths)
    except (EximgpdfError, OSError) as e:
        log.error("%s", e)
        return 1

    log.info("done: %d pdf(s), %d image(s) written", summary.files, summary.images)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
