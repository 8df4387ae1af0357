# ABOUTME: Streaming SHA-256 content hashing, the deduplication identity of a book.
# ABOUTME: Memory use is constant regardless of file size (large PDFs and comics).

import hashlib
from pathlib import Path

_CHUNK_SIZE = 64 * 1024


def compute_file_hash(path: Path) -> str:
    """Return the lowercase hex SHA-256 digest of a file's full contents.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
