# ABOUTME: Shared pytest fixtures for Librarium tests.
# ABOUTME: Builds real EPUB, PDF, CBZ and image files plus a temporary catalog and config.

import io
import struct
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pymupdf
import pytest
from ebooklib import epub
from PIL import Image

from librarium.config import LibraryConfig
from librarium.core.importer import BookImporter
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import open_library

RED = (220, 20, 20)

OPF_SCHEME = "{http://www.idpf.org/2007/opf}scheme"


def _image_bytes(
    color: tuple[int, int, int] = RED,
    size: tuple[int, int] = (600, 900),
    image_format: str = "JPEG",
) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, image_format)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for encoded solid-color images."""
    return _image_bytes


@pytest.fixture
def make_epub() -> Callable[..., Path]:
    """Factory for minimal but valid EPUB files built with ebooklib."""

    def _make(
        path: Path,
        title: str = "The Name of the Rose",
        author: str | list[str] | None = "Umberto Eco",
        *,
        description: str | None = None,
        date: str | None = None,
        isbn: str | None = None,
        scheme_isbn: str | None = None,
        cover: bytes | None = None,
        extra_images: dict[str, bytes] | None = None,
    ) -> Path:
        book = epub.EpubBook()
        book.set_identifier(f"id-{title}")
        book.set_title(title)
        book.set_language("en")
        authors = [author] if isinstance(author, str) else (author or [])
        for name in authors:
            book.add_author(name)
        if description:
            book.add_metadata("DC", "description", description)
        if date:
            book.add_metadata("DC", "date", date)
        if isbn:
            book.add_metadata("DC", "identifier", f"urn:isbn:{isbn}", {"id": "isbn-id"})
        if scheme_isbn:
            book.add_metadata("DC", "identifier", scheme_isbn, {OPF_SCHEME: "ISBN"})
        if cover is not None:
            book.set_cover("images/cover.jpg", cover)

        for i, (name, content) in enumerate((extra_images or {}).items()):
            book.add_item(
                epub.EpubImage(
                    uid=f"img{i}",
                    file_name=name,
                    media_type="image/png" if name.endswith(".png") else "image/jpeg",
                    content=content,
                )
            )

        chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
        chapter.content = (
            b"<html><body><h1>Chapter 1</h1><p>Content for "
            + title.encode()
            + b".</p></body></html>"
        )
        book.add_item(chapter)
        book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())
        book.spine = ["nav", chapter]

        epub.write_epub(str(path), book)
        return path

    return _make


@pytest.fixture
def make_pdf() -> Callable[..., Path]:
    """Factory for small PDFs built with PyMuPDF."""

    def _make(
        path: Path,
        *,
        title: str = "",
        author: str = "",
        pages: int = 1,
        creation_date: str | None = None,
    ) -> Path:
        doc = pymupdf.open()
        for i in range(pages):
            page = doc.new_page(width=300, height=400)
            page.insert_text((50, 72), f"Page {i + 1}")
        metadata = {"title": title, "author": author}
        if creation_date:
            metadata["creationDate"] = creation_date
        doc.set_metadata(metadata)
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def make_cbz() -> Callable[[Path, dict[str, bytes]], Path]:
    """Factory for CBZ archives from a mapping of entry name to bytes."""

    def _make(path: Path, entries: dict[str, bytes]) -> Path:
        with zipfile.ZipFile(path, "w") as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return path

    return _make


@pytest.fixture
def sample_epub(tmp_path: Path, make_epub: Callable[..., Path]) -> Path:
    """An EPUB with full metadata and a red cover."""
    return make_epub(
        tmp_path / "name_of_the_rose.epub",
        description="A mystery set in a medieval monastery.",
        date="1980-01-01",
        isbn="9780156001311",
        cover=_image_bytes(RED),
    )


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """A file with an .epub name that is not a zip archive."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def library_config(tmp_path: Path) -> LibraryConfig:
    """Pipeline configuration rooted in the test's temp directory."""
    return LibraryConfig(
        storage_root=tmp_path / "storage" / "books",
        covers_root=tmp_path / "storage" / "covers",
    )


@pytest.fixture
def catalog(tmp_path: Path) -> Iterator[LibraryCatalog]:
    """A LibraryCatalog backed by a temporary database."""
    conn = open_library(tmp_path / "library.db")
    yield LibraryCatalog(conn)
    conn.close()


@pytest.fixture
def importer(catalog: LibraryCatalog, library_config: LibraryConfig) -> BookImporter:
    return BookImporter(catalog, library_config)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Directory for staged upload files."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


def _truncated_png(png: bytes) -> bytes:
    """Keep half of the first IDAT chunk and follow it with a mangled chunk header.

    Pillow identifies the image, then fails while decoding pixel data.
    """
    pos = 8
    parts = [png[:pos]]
    while pos < len(png):
        (length,) = struct.unpack(">I", png[pos:pos + 4])
        chunk_type = png[pos + 4:pos + 8]
        if chunk_type == b"IDAT":
            data = png[pos + 8:pos + 8 + length][: length // 2]
            parts.append(struct.pack(">I", len(data)) + b"IDAT" + data + b"\x00" * 4)
            parts.append(b"\x00" * 4 + b"I\xc2ND" + b"\x00" * 4)
            break
        parts.append(png[pos:pos + 12 + length])
        pos += 12 + length
    return b"".join(parts)


@pytest.fixture
def broken_png() -> bytes:
    """A PNG whose header parses but whose image data is corrupt."""
    return _truncated_png(_image_bytes(image_format="PNG"))
