from __future__ import annotations
from pathlib import Path
import re
from typing import Tuple, Union

_DIGITS = re.compile(r"(\d+)")


def natural_key(text: Union[str, Path]) -> Tuple:
    """
    Sort key that orders embedded numbers by value, ignoring case.
    file2.pdf -> file10.pdf -> File11.pdf

    Even positions of the split are text, odd positions are ints, so two
    keys always compare like with like. The raw string is the tiebreaker
    (file01 vs file1).
    """
    text = str(text)
    parts = _DIGITS.split(text.lower())
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts)), text


def image_dir_for(pdf_path: Path) -> Path:
    """
    Sibling directory that receives a document's images.
    scans/Report.pdf -> scans/Report/
    """
    pdf_path = Path(pdf_path)
    return pdf_path.parent / pdf_path.stem


def image_name(page: int, index: int) -> str:
    """p<page>_i<index>.png, both 1-based."""
    if page < 1 or index < 1:
        raise ValueError(f"page and index are 1-based, got page={page} index={index}")
    return f"p{page}_i{index}.png"
