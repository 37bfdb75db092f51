# src/eximgpdf/extract.py
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

import fitz  # PyMuPDF
from tqdm import tqdm

from .errors import DocumentError
from .naming import image_dir_for, image_name

log = logging.getLogger(__name__)
mupdf_log = logging.getLogger("eximgpdf.mupdf")

PNG_COLORSPACES = {fitz.csGRAY.name, fitz.csRGB.name}

MaskSource = Optional[Union[int, bytes]]


def quiet_mupdf() -> None:
    """Stop MuPDF writing to stderr; its warnings go through `mupdf_log` instead."""
    fitz.TOOLS.mupdf_display_errors(False)
    fitz.TOOLS.mupdf_warnings(reset=True)


def forward_mupdf_warnings(pdf_path: Path) -> None:
    text = fitz.TOOLS.mupdf_warnings(reset=True)
    for line in (text or "").splitlines():
        if line.strip():
            mupdf_log.warning("%s: %s", pdf_path.name, line.strip())


def open_document(pdf_path: Path) -> fitz.Document:
    """
    Open a PDF, trying the empty user password if it is encrypted.
    Documents that really need a password are rejected.
    """
    try:
        doc = fitz.open(pdf_path)
    except (RuntimeError, ValueError) as e:
        raise DocumentError(f"cannot open {str(pdf_path)!r}: {e}") from e
    if doc.needs_pass and not doc.authenticate(""):
        doc.close()
        raise DocumentError(f"unable to decrypt {str(pdf_path)!r}: a password is required")
    return doc


def _digest(pix: fitz.Pixmap) -> bytes:
    h = hashlib.md5()
    h.update(f"{pix.width}x{pix.height}x{pix.n}:".encode("ascii"))
    h.update(pix.samples)
    return h.digest()


def _load_mask(doc: fitz.Document, smask: MaskSource) -> fitz.Pixmap:
    # xref of an SMask object, or encoded bytes of an inline image's mask
    if isinstance(smask, int):
        return fitz.Pixmap(doc, smask)
    return fitz.Pixmap(smask)


def _to_png_pixmap(doc: fitz.Document, pix: fitz.Pixmap, smask: MaskSource) -> fitz.Pixmap:
    # PNG only carries gray or RGB
    if pix.colorspace is not None and pix.colorspace.name not in PNG_COLORSPACES:
        pix = fitz.Pixmap(fitz.csRGB, pix)
    if smask:
        try:
            pix = fitz.Pixmap(pix, _load_mask(doc, smask))
        except (RuntimeError, ValueError) as e:
            log.warning("ignoring soft mask: %s", e)
    return pix


def _same_bbox(a, b, tol: float = 0.5) -> bool:
    return all(abs(x - y) <= tol for x, y in zip(a, b))


def _page_images(doc: fitz.Document, page: fitz.Page) -> List[Tuple[fitz.Pixmap, MaskSource]]:
    """
    Decoded images of a page in drawing order, each with its soft mask.

    XObject images are decoded from their xref. Inline images (BI ... EI)
    have xref 0; their bytes come from the matching image block of the
    page's text dict.
    """
    smasks = {img[0]: img[1] for img in page.get_images(full=True)}
    blocks = None
    images: List[Tuple[fitz.Pixmap, MaskSource]] = []
    for info in page.get_image_info(xrefs=True):
        xref = info.get("xref", 0)
        if xref:
            images.append((fitz.Pixmap(doc, xref), smasks.get(xref, 0)))
            continue
        if blocks is None:
            blocks = [
                b for b in page.get_text("dict", flags=fitz.TEXT_PRESERVE_IMAGES)["blocks"]
                if b.get("type") == 1
            ]
        block = next((b for b in blocks if _same_bbox(b["bbox"], info["bbox"])), None)
        if block is None:
            raise ValueError(f"no image data for inline image at {tuple(info['bbox'])}")
        blocks.remove(block)
        images.append((fitz.Pixmap(block["image"]), block.get("mask")))
    return images


def extract_images_from_pdf(
    pdf_path: Union[str, Path],
    out_dir: Union[str, Path, None] = None,
) -> List[Path]:
    """
    Write every distinct embedded image of a PDF as PNG.

    Images land in `out_dir` (default: a sibling directory named after the
    PDF) as p<page>_i<index>.png. `index` is the 1-based position of the
    image among everything drawn on the page, inline images and duplicates
    included, so names do not shift when an earlier image is skipped.

    Duplicates are detected per document by hashing the decoded pixels.
    `out_dir` is created only once there is something to write.

    Returns:
        Paths of the written PNGs, in write order.
    """
    pdf_path = Path(pdf_path)
    out_dir = Path(out_dir) if out_dir is not None else image_dir_for(pdf_path)

    log.info("examining %s", pdf_path)
    doc = open_document(pdf_path)
    written: List[Path] = []
    seen: Set[bytes] = set()

    try:
        for page_index in range(doc.page_count):
            page_no = page_index + 1
            try:
                images = _page_images(doc, doc.load_page(page_index))
            except (RuntimeError, ValueError) as e:
                raise DocumentError(f"cannot read images on page {page_no} of {str(pdf_path)!r}: {e}") from e

            for index, (pix, smask) in enumerate(images, start=1):
                digest = _digest(pix)
                if digest in seen:
                    log.debug("skipping duplicate image %d on page %d", index, page_no)
                    continue
                seen.add(digest)

                out_dir.mkdir(exist_ok=True)
                out_path = out_dir / image_name(page_no, index)
                log.info("creating %s", out_path)
                try:
                    _to_png_pixmap(doc, pix, smask).save(str(out_path), output="png")
                except (RuntimeError, ValueError) as e:
                    raise DocumentError(f"cannot write {str(out_path)!r}: {e}") from e
                written.append(out_path)
    finally:
        doc.close()
        forward_mupdf_warnings(pdf_path)

    return written


def extract_images_from_files(pdf_paths: Iterable[Path], progress: bool = False) -> Dict[Path, List[Path]]:
    """
    Run `extract_images_from_pdf` over `pdf_paths` in order; stops at the first error.

    Returns:
        Dict mapping PDF path -> list of written image paths.
    """
    results: Dict[Path, List[Path]] = {}
    for pdf in tqdm(pdf_paths, desc="PDFs", unit="file", disable=not progress):
        results[pdf] = extract_images_from_pdf(pdf)
    return results
