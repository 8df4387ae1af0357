# ABOUTME: CBZ (zip of images) cover extraction using zipfile.
# ABOUTME: The first page in natural sort order becomes the cover; CBZ carries no text metadata.

import zipfile
from pathlib import Path

from librarium.formats import MetadataReadError
from librarium.formats.comic import page_extension, sorted_pages
from librarium.metadata.types import ExtractedMetadata


def extract_cbz_metadata(path: Path, fallback_title: str | None = None) -> ExtractedMetadata:
    """Extract the cover page from a CBZ archive.

    Title is always derived from the filename since CBZ has no
    authoritative title metadata.

    Raises:
        MetadataReadError: If the file is not a readable zip archive.
    """
    title = fallback_title or path.stem

    try:
        with zipfile.ZipFile(path) as archive:
            pages = sorted_pages(archive.namelist())
            if not pages:
                return ExtractedMetadata(title=title)
            cover = archive.read(pages[0])
    except (zipfile.BadZipFile, OSError, KeyError) as exc:
        raise MetadataReadError(f"Failed to read CBZ: {path}: {exc}") from exc

    return ExtractedMetadata(
        title=title,
        page_count=len(pages),
        cover_image=cover,
        cover_ext=page_extension(pages[0]),
    )
