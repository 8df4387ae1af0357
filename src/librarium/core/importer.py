# ABOUTME: Import pipeline turning one staged file into a deduplicated catalog entry.
# ABOUTME: Detects format, hashes, dedups, relocates, extracts metadata, builds the cover, persists.

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from librarium.config import LibraryConfig
from librarium.core.covers import generate_cover
from librarium.core.storage import discard, relocate, staged_copy
from librarium.db.catalog import DuplicateBookError, LibraryCatalog, new_book_id
from librarium.db.hashing import compute_file_hash
from librarium.db.mapping import BookRecord, NewBook
from librarium.formats import SUPPORTED_EXTENSIONS, detect_format
from librarium.metadata.extract import extract_metadata

logger = logging.getLogger(__name__)


class UnsupportedFormatError(ValueError):
    """Raised when a file's extension is not an ingestible book format."""

    def __init__(self, filename: str) -> None:
        suffix = PurePath(filename).suffix or "(none)"
        super().__init__(f"Unsupported format: {suffix}")
        self.filename = filename


@dataclass
class ImportResult:
    """The cataloged book, and whether it already existed before this import."""

    book: BookRecord
    duplicate: bool


class BookImporter:
    """Single entry point for ingesting a book, shared by uploads and the inbox watcher.

    Safe to use from concurrent callers as long as each has its own catalog
    connection: the unique index on content_hash is the only mutual
    exclusion, and a caller that loses an insert race returns the winner's
    record as a duplicate.
    """

    def __init__(self, catalog: LibraryCatalog, config: LibraryConfig) -> None:
        self._catalog = catalog
        self._config = config

    def import_book(
        self, collection_id: str, source_path: Path, original_filename: str,
    ) -> ImportResult:
        """Ingest a fully written file into a collection.

        The source is moved (not copied) into storage on success. Metadata
        and cover problems never fail the import; they only make the
        catalog entry poorer.

        Args:
            collection_id: Target collection; its existence is the caller's concern.
            source_path: Staged file that will not be modified further.
            original_filename: Name the user uploaded, used for format
                detection, the stored extension and the fallback title.

        Returns:
            ImportResult with duplicate=True when identical content was
            already cataloged (in any collection).

        Raises:
            UnsupportedFormatError: If the extension is not supported.
            ValueError: If collection_id is not a safe path segment.
            OSError: If the file cannot be read or relocated.
            CatalogConflictError: On a constraint failure other than a
                duplicate content hash.
        """
        fmt = detect_format(original_filename)
        if fmt is None:
            raise UnsupportedFormatError(original_filename)

        self._config.collection_dir(collection_id)

        content_hash = compute_file_hash(source_path)

        existing = self._catalog.get_by_hash(content_hash)
        if existing is not None:
            logger.info("Duplicate of book %s: %s", existing.id, original_filename)
            return ImportResult(book=existing, duplicate=True)

        name = PurePath(original_filename)
        book_id = new_book_id()
        dest = self._config.book_path(collection_id, book_id, name.suffix)

        relocate(source_path, dest)

        cover_path: Path | None = None
        try:
            meta = extract_metadata(dest, fmt, fallback_title=name.stem)

            if meta.has_cover:
                cover = generate_cover(book_id, meta.cover_image, self._config)
                if cover.success:
                    cover_path = cover.path
                else:
                    logger.warning("Cover generation failed for %s: %s", original_filename, cover.error)

            new_book = NewBook(
                collection_id=collection_id,
                title=meta.title,
                author=meta.author,
                format=fmt,
                file_path=dest,
                cover_path=cover_path,
                description=meta.description,
                isbn=meta.isbn,
                published_at=meta.published_at,
                page_count=meta.page_count,
                file_size=dest.stat().st_size,
                language=meta.language,
                content_hash=content_hash,
            )
            book = self._catalog.add_book(new_book, book_id=book_id)
        except DuplicateBookError:
            # Lost a race with a concurrent import of the same content
            discard(dest)
            discard(cover_path)
            winner = self._catalog.get_by_hash(content_hash)
            if winner is None:
                raise
            logger.info("Duplicate of book %s (concurrent import): %s", winner.id, original_filename)
            return ImportResult(book=winner, duplicate=True)
        except Exception:
            discard(dest)
            discard(cover_path)
            raise

        logger.info("Imported %s as book %s into %s", original_filename, book.id, collection_id)
        return ImportResult(book=book, duplicate=False)


@dataclass
class ImportSummary:
    """Summary of a batch import."""

    added: int = 0
    skipped: int = 0
    errors: int = 0
    error_details: list[tuple[Path, str]] = field(default_factory=list)


def find_book_files(directory: Path) -> list[Path]:
    """Recursively find every file with a supported book extension."""
    return sorted(
        path
        for path in directory.rglob("*")
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )


def import_paths(
    importer: BookImporter, collection_id: str, paths: list[Path],
) -> ImportSummary:
    """Import local files without consuming them.

    Each file is staged first, so the originals stay where they are.
    Duplicates count as skipped; unsupported or unreadable files are
    recorded as errors and the batch continues.
    """
    summary = ImportSummary()

    for path in paths:
        try:
            with staged_copy(path) as staged:
                result = importer.import_book(collection_id, staged, path.name)
        except (UnsupportedFormatError, OSError) as exc:
            summary.errors += 1
            summary.error_details.append((path, str(exc)))
            continue

        if result.duplicate:
            summary.skipped += 1
        else:
            summary.added += 1

    return summary
