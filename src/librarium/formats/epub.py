# ABOUTME: EPUB metadata and cover extraction using ebooklib.
# ABOUTME: Reads Dublin Core fields from the OPF package document and locates the cover image.

import logging
import re
from pathlib import Path, PurePosixPath

import ebooklib
from ebooklib import epub

from librarium.formats import MetadataReadError
from librarium.metadata.types import ExtractedMetadata

logger = logging.getLogger(__name__)

_COVER_IMAGE_RE = re.compile(r"\.(jpe?g|png|webp)$", re.IGNORECASE)
_ISBN_PREFIX_RE = re.compile(r"^(urn:)?isbn:?\s*", re.IGNORECASE)


def _metadata_entries(book: epub.EpubBook, namespace: str, name: str) -> list:
    """All (value, attributes) entries for a field; empty if the namespace is absent."""
    try:
        return book.get_metadata(namespace, name) or []
    except KeyError:
        return []


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = _metadata_entries(book, namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_author(book: epub.EpubBook) -> str | None:
    """Join every dc:creator into a single display string."""
    creators = _metadata_entries(book, "DC", "creator")
    names = [str(entry[0]).strip() for entry in creators if entry[0]]
    return ", ".join(names) if names else None


def _scheme_of(attrs: dict) -> str | None:
    """Find the identifier scheme, with or without the opf namespace."""
    for key, value in attrs.items():
        if key == "scheme" or key.endswith("}scheme") or key.endswith(":scheme"):
            return str(value)
    return None


def _looks_like_isbn(value: str) -> bool:
    cleaned = value.replace("-", "").replace(" ", "")
    return len(cleaned) in (10, 13) and cleaned[:-1].isdigit() and (
        cleaned[-1].isdigit() or cleaned[-1] in "xX"
    )


def _detect_isbn(book: epub.EpubBook) -> str | None:
    """Pick the ISBN out of the dc:identifier entries.

    Preference order: an identifier whose scheme is ISBN, then one whose text
    mentions ISBN (e.g. ``urn:isbn:...``), then any value shaped like an ISBN.
    """
    entries = [
        (str(value).strip(), attrs or {})
        for value, attrs in _metadata_entries(book, "DC", "identifier")
        if value
    ]

    for value, attrs in entries:
        scheme = _scheme_of(attrs)
        if scheme and scheme.lower().startswith("isbn"):
            return _ISBN_PREFIX_RE.sub("", value)

    for value, _attrs in entries:
        if "isbn" in value.lower():
            return _ISBN_PREFIX_RE.sub("", value)

    for value, _attrs in entries:
        if _looks_like_isbn(value):
            return value

    return None


def _extension_of(name: str) -> str:
    return PurePosixPath(name).suffix.lstrip(".").lower() or "jpg"


def _cover_id(book: epub.EpubBook) -> str | None:
    """Manifest id named by <meta name="cover" content="..."/>, if any."""
    # ebooklib files OPF <meta> elements under "meta" with the name in the attributes
    for _value, attrs in _metadata_entries(book, "OPF", "meta"):
        if attrs and attrs.get("name") == "cover" and attrs.get("content"):
            return attrs["content"].strip()
    for _value, attrs in _metadata_entries(book, "OPF", "cover"):
        if attrs and attrs.get("content"):
            return attrs["content"].strip()
    return None


def _extract_cover(book: epub.EpubBook) -> tuple[bytes, str] | None:
    """Locate the cover image.

    Order: the manifest item named by <meta name="cover">, then an EPUB3
    cover-image item, then any image whose filename contains "cover".
    ebooklib resolves manifest hrefs against the OPF directory when reading.
    """
    cover_id = _cover_id(book)
    if cover_id:
        cover_item = book.get_item_with_id(cover_id)
        if cover_item is not None:
            content = cover_item.get_content()
            if content:
                return content, _extension_of(cover_item.get_name())
        logger.debug("Cover meta points at missing manifest item %s", cover_id)

    for item in book.get_items_of_type(ebooklib.ITEM_COVER):
        name = item.get_name() or ""
        content = item.get_content()
        if content and _COVER_IMAGE_RE.search(name):
            return content, _extension_of(name)

    for item in book.get_items():
        if item.get_type() not in (ebooklib.ITEM_IMAGE, ebooklib.ITEM_COVER):
            continue
        name = item.get_name() or ""
        if "cover" in name.lower() and _COVER_IMAGE_RE.search(name):
            return item.get_content(), _extension_of(name)

    return None


def extract_epub_metadata(path: Path, fallback_title: str | None = None) -> ExtractedMetadata:
    """Extract metadata and the cover image from an EPUB file.

    Args:
        path: Path to the EPUB file.
        fallback_title: Title to use when the OPF has no dc:title.
            Defaults to the file stem.

    Returns:
        ExtractedMetadata populated with the fields found.

    Raises:
        MetadataReadError: If the container or package document cannot be read.
    """
    if not path.exists():
        raise MetadataReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise MetadataReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    title = _get_metadata_value(book, "DC", "title") or fallback_title or path.stem
    cover = _extract_cover(book)

    return ExtractedMetadata(
        title=title,
        author=_get_author(book),
        description=_get_metadata_value(book, "DC", "description"),
        isbn=_detect_isbn(book),
        published_at=_get_metadata_value(book, "DC", "date"),
        language=_get_metadata_value(book, "DC", "language"),
        cover_image=cover[0] if cover else None,
        cover_ext=cover[1] if cover else None,
    )
