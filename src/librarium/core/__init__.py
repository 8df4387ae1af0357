# ABOUTME: Core ingestion services: the import orchestrator, storage, covers, removal, watcher.
# ABOUTME: Exports the import entry point and its result and error types.

from librarium.core.importer import (
    BookImporter,
    ImportResult,
    ImportSummary,
    UnsupportedFormatError,
    import_paths,
)
from librarium.core.removal import delete_book

__all__ = [
    "BookImporter",
    "ImportResult",
    "ImportSummary",
    "UnsupportedFormatError",
    "delete_book",
    "import_paths",
]
