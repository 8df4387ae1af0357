# ABOUTME: Shared page-selection rules for comic archives (CBZ and CBR).
# ABOUTME: Filters archive entries to images and orders them with a numeric-aware sort.

import re
from collections.abc import Iterable
from pathlib import PurePosixPath

IMAGE_RE = re.compile(r"\.(jpe?g|png|webp|gif)$", re.IGNORECASE)

# Directories and files added by archiving tools, never comic pages
_IGNORED_PREFIXES = ("__MACOSX/",)

_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> list[int | str]:
    """Sort key that orders "page2" before "page10".

    Digit runs compare as integers; everything else compares case-insensitively.
    """
    parts = _DIGITS_RE.split(name.replace("\\", "/"))
    return [int(part) if part.isdigit() else part.lower() for part in parts]


def _is_page(name: str) -> bool:
    normalized = name.replace("\\", "/")
    if normalized.endswith("/") or normalized.startswith(_IGNORED_PREFIXES):
        return False
    if any(segment.startswith(".") for segment in PurePosixPath(normalized).parts):
        return False
    return bool(IMAGE_RE.search(normalized))


def sorted_pages(names: Iterable[str]) -> list[str]:
    """Return the image entries of an archive listing in reading order."""
    return sorted((name for name in names if _is_page(name)), key=natural_sort_key)


def page_extension(name: str) -> str:
    """Lowercased extension of an archive entry, without the dot."""
    return PurePosixPath(name.replace("\\", "/")).suffix.lstrip(".").lower() or "jpg"
