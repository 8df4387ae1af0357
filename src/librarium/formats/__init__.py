# ABOUTME: Supported book formats and filename-based format detection.
# ABOUTME: detect_format is the sole gate deciding whether a file is ingestible.

from enum import Enum
from pathlib import PurePath


class BookFormat(str, Enum):
    """Closed set of formats the library knows about.

    IMAGES is part of the shared vocabulary (a bare folder of images) but no
    extension maps to it and it has no extraction strategy.
    """

    EPUB = "epub"
    PDF = "pdf"
    CBZ = "cbz"
    CBR = "cbr"
    IMAGES = "images"


class MetadataReadError(Exception):
    """Raised by a format handler when a container cannot be read or parsed."""


_EXTENSION_MAP: dict[str, BookFormat] = {
    "epub": BookFormat.EPUB,
    "pdf": BookFormat.PDF,
    "cbz": BookFormat.CBZ,
    "cbr": BookFormat.CBR,
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(f".{ext}" for ext in _EXTENSION_MAP)


def detect_format(filename: str) -> BookFormat | None:
    """Map a filename to a supported BookFormat by its extension.

    Case-insensitive. Files without an extension, or with one outside the
    supported set, yield None.
    """
    suffix = PurePath(filename).suffix
    if not suffix:
        return None
    return _EXTENSION_MAP.get(suffix[1:].lower())


__all__ = [
    "SUPPORTED_EXTENSIONS",
    "BookFormat",
    "MetadataReadError",
    "detect_format",
]
