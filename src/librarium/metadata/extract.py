# ABOUTME: Format dispatch for metadata extraction with a single fallback policy.
# ABOUTME: Any handler failure degrades to filename-only metadata instead of failing the import.

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from librarium.formats import BookFormat
from librarium.formats.cbr import extract_cbr_metadata
from librarium.formats.cbz import extract_cbz_metadata
from librarium.formats.epub import extract_epub_metadata
from librarium.formats.pdf import extract_pdf_metadata
from librarium.metadata.types import ExtractedMetadata

logger = logging.getLogger(__name__)

# Handler signature: (path, fallback_title) -> ExtractedMetadata
Extractor = Callable[[Path, str | None], ExtractedMetadata]

_EXTRACTORS: dict[BookFormat, Extractor] = {
    BookFormat.EPUB: extract_epub_metadata,
    BookFormat.PDF: extract_pdf_metadata,
    BookFormat.CBZ: extract_cbz_metadata,
    BookFormat.CBR: extract_cbr_metadata,
}

# Formats whose containers carry no authoritative title
_FILENAME_TITLED = frozenset({BookFormat.CBZ, BookFormat.CBR})


def extract_metadata(
    path: Path,
    fmt: BookFormat,
    fallback_title: str | None = None,
) -> ExtractedMetadata:
    """Run the handler for fmt and return its metadata.

    Metadata is an enrichment, never a gate: if the handler raises, or the
    format has no handler (IMAGES), the result carries only a title.

    Args:
        path: The stored book file.
        fmt: Format already determined by detect_format.
        fallback_title: Display title to use when the container has none,
            usually the original upload's filename stem. For comic formats
            it always wins over whatever the handler derives.

    Returns:
        ExtractedMetadata, never None.
    """
    fallback = ExtractedMetadata(title=fallback_title or path.stem)

    extractor = _EXTRACTORS.get(fmt)
    if extractor is None:
        return fallback

    try:
        meta = extractor(path, fallback_title)
    except Exception as exc:
        logger.warning("Metadata extraction failed for %s (%s): %s", path.name, fmt.value, exc)
        return fallback

    if fmt in _FILENAME_TITLED and fallback_title:
        meta = replace(meta, title=fallback_title)
    return meta
