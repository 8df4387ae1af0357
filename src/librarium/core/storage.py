# ABOUTME: Moves staged files into permanent storage and stages caller-owned files.
# ABOUTME: Rename is atomic; the cross-device fallback (copy then delete) is not.

import errno
import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


def relocate(source: Path, dest: Path) -> None:
    """Move source to dest, creating dest's directory if needed.

    Same-filesystem moves are a single rename, so no reader ever sees a
    partially written file at dest. When source and dest live on different
    filesystems (EXDEV), the file is copied and the source deleted instead.
    That fallback is not atomic: a crash between copy and delete leaves the
    content in both places.

    Raises:
        OSError: On any unrecoverable filesystem error. A partially written
            dest left by a failed fallback is removed before re-raising.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)

    try:
        source.rename(dest)
        return
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise

    logger.info("Cross-device move of %s, falling back to copy", source.name)
    try:
        shutil.copy2(source, dest)
        source.unlink()
    except OSError:
        discard(dest)
        raise


def discard(path: Path | None) -> None:
    """Best-effort removal of a file this process created.

    Never raises; failures are logged as warnings.
    """
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove %s: %s", path, exc)


@contextmanager
def staged_copy(path: Path) -> Iterator[Path]:
    """Copy a file into a private staging directory for the import pipeline.

    The importer moves its source into storage, so callers that must keep
    their original (the inbox watcher, the CLI) hand it a staged copy. The
    staging directory is removed on exit, whether or not the import
    consumed the file.
    """
    staging_dir = Path(tempfile.mkdtemp(prefix="librarium-staging-"))
    try:
        staged = staging_dir / path.name
        shutil.copy2(path, staged)
        yield staged
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)
