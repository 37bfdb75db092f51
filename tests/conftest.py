from __future__ import annotations

import sys
from pathlib import Path

import fitz
import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SRC_STR = str(SRC)
if SRC_STR not in sys.path:
    sys.path.insert(0, SRC_STR)


def _pixmap(color) -> fitz.Pixmap:
    # a ready-made Pixmap (CMYK, RGBA, ...) is inserted as is
    if isinstance(color, fitz.Pixmap):
        return color
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 8), False)
    pix.set_rect(pix.irect, color)
    return pix


@pytest.fixture
def make_pdf():
    """Factory: make_pdf(path, [[colors on page 1], [colors on page 2], ...], **save_kwargs)."""

    def _make(path: Path, pages, **save_kwargs) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = fitz.open()
        for colors in pages:
            page = doc.new_page(width=200, height=200)
            for i, color in enumerate(colors):
                rect = fitz.Rect(10 + 40 * i, 10, 40 + 40 * i, 40)
                page.insert_image(rect, pixmap=_pixmap(color))
        doc.save(str(path), **save_kwargs)
        doc.close()
        return path

    return _make
