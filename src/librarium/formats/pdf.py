# ABOUTME: PDF metadata and cover extraction using PyMuPDF.
# ABOUTME: Reads the document-information dictionary and renders page one as the cover.

import logging
import re
from pathlib import Path

import pymupdf

from librarium.formats import MetadataReadError
from librarium.metadata.types import ExtractedMetadata

logger = logging.getLogger(__name__)

DEFAULT_RENDER_SCALE = 1.5

# PDF dates look like D:20190412153000+02'00'
_PDF_DATE_RE = re.compile(r"^(?:D:)?(\d{4})(\d{2})?(\d{2})?")


def _info_value(info: dict, key: str) -> str | None:
    value = info.get(key)
    if not value:
        return None
    value = str(value).strip()
    return value or None


def _parse_pdf_date(raw: str | None) -> str | None:
    """Convert a PDF date string to ISO form (YYYY, YYYY-MM or YYYY-MM-DD)."""
    if not raw:
        return None
    match = _PDF_DATE_RE.match(raw.strip())
    if not match:
        return None
    return "-".join(part for part in match.groups() if part)


def _render_first_page(doc: pymupdf.Document, scale: float) -> bytes | None:
    """Render page one to PNG bytes, or None if rendering is not possible."""
    if doc.page_count == 0:
        return None
    try:
        page = doc.load_page(0)
        pix = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
        return pix.tobytes("png")
    except Exception as exc:
        logger.debug("Could not render first page for cover: %s", exc)
        return None


def extract_pdf_metadata(
    path: Path,
    fallback_title: str | None = None,
    *,
    render_scale: float = DEFAULT_RENDER_SCALE,
) -> ExtractedMetadata:
    """Extract title, author, page count and a rendered cover from a PDF.

    Args:
        path: Path to the PDF file.
        fallback_title: Title used when the info dictionary has none.
        render_scale: Zoom factor applied when rasterizing the first page.

    Raises:
        MetadataReadError: If the document cannot be opened.
    """
    try:
        doc = pymupdf.open(str(path))
    except Exception as exc:
        raise MetadataReadError(f"Failed to open PDF: {path}: {exc}") from exc

    with doc:
        info = doc.metadata or {}
        cover = _render_first_page(doc, render_scale)

        return ExtractedMetadata(
            title=_info_value(info, "title") or fallback_title or path.stem,
            author=_info_value(info, "author"),
            published_at=_parse_pdf_date(info.get("creationDate")),
            page_count=doc.page_count,
            cover_image=cover,
            cover_ext="png" if cover else None,
        )
