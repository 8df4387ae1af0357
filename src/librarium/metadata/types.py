# ABOUTME: Core data structure produced by every format handler.
# ABOUTME: ExtractedMetadata is transient; the importer folds it into a catalog row.

from dataclasses import dataclass


@dataclass
class ExtractedMetadata:
    """Best-effort metadata pulled out of a book container.

    Only title is required: when a container has nothing usable, the title
    falls back to the filename stem so every book can still be cataloged.
    """

    title: str
    author: str | None = None
    description: str | None = None
    isbn: str | None = None
    published_at: str | None = None
    language: str | None = None
    page_count: int | None = None
    cover_image: bytes | None = None
    cover_ext: str | None = None

    @property
    def has_cover(self) -> bool:
        """Whether cover image data is present."""
        return self.cover_image is not None and len(self.cover_image) > 0
