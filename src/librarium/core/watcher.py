# ABOUTME: Inbox folder watcher that feeds dropped files into the import pipeline.
# ABOUTME: Uses watchdog; each file is staged, imported with its own connection, then removed.

import logging
import os
import time
from contextlib import closing
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from librarium.config import LibraryConfig
from librarium.core.importer import BookImporter, ImportResult
from librarium.core.storage import staged_copy
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import open_library
from librarium.formats import detect_format

logger = logging.getLogger(__name__)


class _InboxEventHandler(FileSystemEventHandler):
    """Forwards new and moved-in files to the watcher."""

    def __init__(self, watcher: "InboxWatcher") -> None:
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.process_file(Path(os.fsdecode(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.process_file(Path(os.fsdecode(event.dest_path)))


class InboxWatcher:
    """Watch a folder and import every book file that lands in it.

    The inbox is a staging area, not storage: a file is copied to a private
    staging path before import and deleted from the inbox once the import
    succeeds (or finds a duplicate). Failed files stay put and are retried
    the next time the watcher sees them.
    """

    def __init__(
        self,
        inbox: Path,
        collection_id: str,
        db_path: Path,
        config: LibraryConfig,
        *,
        stability_seconds: float = 2.0,
        poll_interval: float = 0.5,
    ) -> None:
        self._inbox = inbox
        self._collection_id = collection_id
        self._db_path = db_path
        self._config = config
        self._stability_seconds = stability_seconds
        self._poll_interval = poll_interval
        self._observer: Observer | None = None

    def _wait_until_stable(self, path: Path) -> bool:
        """Block until the file's size stops changing. False if it vanished."""
        last_size = -1
        stable_since = time.monotonic()
        while True:
            try:
                size = path.stat().st_size
            except FileNotFoundError:
                return False
            now = time.monotonic()
            if size != last_size:
                last_size = size
                stable_since = now
            elif now - stable_since >= self._stability_seconds:
                return True
            time.sleep(self._poll_interval)

    def process_file(self, path: Path) -> ImportResult | None:
        """Import one inbox file.

        Returns:
            The ImportResult, or None if the file was ignored, disappeared
            or failed to import. Failures are logged, never raised, so one
            bad file cannot stop the watcher.
        """
        if detect_format(path.name) is None:
            logger.debug("Ignoring non-book file %s", path.name)
            return None

        if not self._wait_until_stable(path):
            return None

        try:
            with closing(open_library(self._db_path)) as conn:
                importer = BookImporter(LibraryCatalog(conn), self._config)
                with staged_copy(path) as staged:
                    result = importer.import_book(self._collection_id, staged, path.name)
        except Exception as exc:
            logger.error("Failed to import %s: %s", path.name, exc)
            return None

        if result.duplicate:
            logger.info("Skipped duplicate: %s", path.name)
        else:
            logger.info("Imported from inbox: %s -> book %s", path.name, result.book.id)

        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Imported %s but could not remove it from the inbox: %s", path.name, exc)

        return result

    def scan_existing(self) -> list[ImportResult]:
        """Import files already sitting in the inbox."""
        results = []
        for path in sorted(self._inbox.iterdir()):
            if path.is_file():
                result = self.process_file(path)
                if result is not None:
                    results.append(result)
        return results

    def start(self) -> None:
        """Import existing files, then start watching for new ones."""
        self._inbox.mkdir(parents=True, exist_ok=True)
        self.scan_existing()

        observer = Observer()
        observer.schedule(_InboxEventHandler(self), str(self._inbox), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Watching %s for collection %s", self._inbox, self._collection_id)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None

    def __enter__(self) -> "InboxWatcher":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
