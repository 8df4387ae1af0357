# ABOUTME: Explicit configuration for the ingestion pipeline (storage roots, cover settings).
# ABOUTME: Built once by the caller and passed in; the core never reads the environment.

from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_DIR = Path.home() / ".librarium"
DEFAULT_STORAGE_ROOT = DEFAULT_DATA_DIR / "books"
DEFAULT_COVERS_ROOT = DEFAULT_DATA_DIR / "covers"

COVER_EXTENSION = ".jpg"


@dataclass(frozen=True)
class LibraryConfig:
    """Where books and covers live, and how covers are rendered.

    Roots are resolved to absolute paths on construction so every stored
    file_path and cover_path is absolute.
    """

    storage_root: Path = DEFAULT_STORAGE_ROOT
    covers_root: Path = DEFAULT_COVERS_ROOT
    cover_width: int = 300
    cover_height: int = 450
    cover_quality: int = 85

    def __post_init__(self) -> None:
        object.__setattr__(self, "storage_root", Path(self.storage_root).expanduser().resolve())
        object.__setattr__(self, "covers_root", Path(self.covers_root).expanduser().resolve())

    @property
    def cover_size(self) -> tuple[int, int]:
        return (self.cover_width, self.cover_height)

    def collection_dir(self, collection_id: str) -> Path:
        """Directory holding every stored file of a collection.

        Raises:
            ValueError: If collection_id is not a single safe path segment.
        """
        if (
            not collection_id
            or collection_id in (".", "..")
            or "/" in collection_id
            or "\\" in collection_id
        ):
            raise ValueError(f"Invalid collection id: {collection_id!r}")
        return self.storage_root / collection_id

    def book_path(self, collection_id: str, book_id: str, extension: str) -> Path:
        """Permanent location: <storage-root>/<collection-id>/<book-id>.<ext>."""
        ext = extension.lower().lstrip(".")
        return self.collection_dir(collection_id) / f"{book_id}.{ext}"

    def cover_path(self, book_id: str) -> Path:
        """Thumbnail location: <covers-root>/<book-id>.jpg."""
        return self.covers_root / f"{book_id}{COVER_EXTENSION}"
