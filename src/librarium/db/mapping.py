# ABOUTME: Converts between catalog dataclasses and SQLite rows.
# ABOUTME: Handles JSON serialization of the ordered tag list.

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from librarium.formats import BookFormat


@dataclass
class NewBook:
    """Everything needed to insert a catalog row; the id is assigned on insert."""

    collection_id: str
    title: str
    format: BookFormat
    file_path: Path
    content_hash: str
    author: str | None = None
    cover_path: Path | None = None
    description: str | None = None
    series: str | None = None
    series_index: float | None = None
    tags: list[str] = field(default_factory=list)
    isbn: str | None = None
    published_at: str | None = None
    page_count: int | None = None
    file_size: int | None = None
    language: str | None = None


@dataclass(frozen=True)
class BookRecord:
    """A cataloged book as stored in the database."""

    id: str
    collection_id: str
    title: str
    format: BookFormat
    file_path: Path
    content_hash: str
    created_at: str
    author: str | None = None
    cover_path: Path | None = None
    description: str | None = None
    series: str | None = None
    series_index: float | None = None
    tags: list[str] = field(default_factory=list)
    isbn: str | None = None
    published_at: str | None = None
    page_count: int | None = None
    file_size: int | None = None
    language: str | None = None


def _unique_tags(tags: list[str]) -> list[str]:
    """Drop blank and repeated tags, keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


def new_book_to_row(book_id: str, book: NewBook) -> dict[str, Any]:
    """Convert a NewBook to a dict suitable for INSERT."""
    tags = _unique_tags(book.tags)
    return {
        "id": book_id,
        "collection_id": book.collection_id,
        "title": book.title,
        "author": book.author,
        "format": book.format.value,
        "file_path": str(book.file_path),
        "cover_path": str(book.cover_path) if book.cover_path else None,
        "description": book.description,
        "series": book.series,
        "series_index": book.series_index,
        "tags": json.dumps(tags) if tags else None,
        "isbn": book.isbn,
        "published_at": book.published_at,
        "page_count": book.page_count,
        "file_size": book.file_size,
        "language": book.language,
        "content_hash": book.content_hash,
    }


def row_to_record(row: Any) -> BookRecord:
    """Convert a database row (dict-like) to a BookRecord."""
    cover = row["cover_path"]
    return BookRecord(
        id=row["id"],
        collection_id=row["collection_id"],
        title=row["title"],
        author=row["author"],
        format=BookFormat(row["format"]),
        file_path=Path(row["file_path"]),
        cover_path=Path(cover) if cover else None,
        description=row["description"],
        series=row["series"],
        series_index=row["series_index"],
        tags=json.loads(row["tags"]) if row["tags"] else [],
        isbn=row["isbn"],
        published_at=row["published_at"],
        page_count=row["page_count"],
        file_size=row["file_size"],
        language=row["language"],
        content_hash=row["content_hash"],
        created_at=row["created_at"],
    )
