# ABOUTME: CBR (RAR of images) cover extraction through the external unrar utility.
# ABOUTME: Degrades to title-only metadata when unrar is missing or the archive is unreadable.

import logging
import shutil
import subprocess
from pathlib import Path

from librarium.formats.comic import page_extension, sorted_pages
from librarium.metadata.types import ExtractedMetadata

logger = logging.getLogger(__name__)

UNRAR = "unrar"

_MAX_COVER_BYTES = 50 * 1024 * 1024
_TIMEOUT_SECONDS = 60


def _run_unrar(binary: str, *args: str) -> bytes:
    result = subprocess.run(
        [binary, *args],
        capture_output=True,
        check=True,
        timeout=_TIMEOUT_SECONDS,
    )
    return result.stdout


def _list_entries(binary: str, path: Path) -> list[str]:
    # lb = bare listing, one filename per line
    output = _run_unrar(binary, "lb", str(path)).decode("utf-8", errors="replace")
    return [line.strip() for line in output.splitlines() if line.strip()]


def _read_entry(binary: str, path: Path, entry: str) -> bytes:
    # p = print file to stdout, -inul = no messages
    return _run_unrar(binary, "p", "-inul", str(path), entry)


def extract_cbr_metadata(path: Path, fallback_title: str | None = None) -> ExtractedMetadata:
    """Extract the cover page from a CBR archive.

    Never raises for archive problems: a missing unrar binary, a failing
    unrar invocation or an empty archive all yield title-only metadata.
    """
    title = fallback_title or path.stem

    binary = shutil.which(UNRAR)
    if binary is None:
        logger.warning("unrar not found on PATH; importing %s without a cover", path.name)
        return ExtractedMetadata(title=title)

    try:
        pages = sorted_pages(_list_entries(binary, path))
        if not pages:
            return ExtractedMetadata(title=title)
        cover = _read_entry(binary, path, pages[0])
    except (subprocess.SubprocessError, OSError) as exc:
        logger.warning("Could not read CBR %s: %s", path.name, exc)
        return ExtractedMetadata(title=title)

    if not cover or len(cover) > _MAX_COVER_BYTES:
        return ExtractedMetadata(title=title, page_count=len(pages))

    return ExtractedMetadata(
        title=title,
        page_count=len(pages),
        cover_image=cover,
        cover_ext=page_extension(pages[0]),
    )
