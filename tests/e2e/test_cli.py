# ABOUTME: End-to-end tests for the Librarium CLI.
# ABOUTME: Runs every command through Click's CliRunner against a temporary library.

from collections.abc import Callable
from contextlib import closing
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from librarium.cli import cli
from librarium.db.catalog import LibraryCatalog
from librarium.db.connection import open_library
from librarium.db.mapping import BookRecord


@pytest.fixture()
def library(tmp_path: Path) -> dict[str, Path]:
    """Paths for an isolated library: database, book storage, covers."""
    return {
        "db": tmp_path / "lib" / "library.db",
        "books": tmp_path / "lib" / "books",
        "covers": tmp_path / "lib" / "covers",
    }


@pytest.fixture()
def books_dir(tmp_path: Path, make_epub: Callable[..., Path], make_image: Callable[..., bytes]) -> Path:
    """A folder with two EPUBs and a stray text file."""
    folder = tmp_path / "incoming"
    folder.mkdir()
    make_epub(folder / "dune.epub", "Dune", "Frank Herbert", cover=make_image())
    make_epub(folder / "emma.epub", "Emma", "Jane Austen", description="Matchmaking in Highbury.")
    (folder / "notes.txt").write_text("not a book")
    return folder


def _run(library: dict[str, Path], *args: str, input: str | None = None) -> Result:
    runner = CliRunner()
    return runner.invoke(cli, [*args, "--db", str(library["db"])], input=input)


def _import(library: dict[str, Path], *paths: Path, collection: str = "shelf") -> Result:
    return _run(
        library,
        "import",
        *(str(p) for p in paths),
        "-c", collection,
        "--storage-root", str(library["books"]),
        "--covers-root", str(library["covers"]),
    )


def _books(library: dict[str, Path]) -> list[BookRecord]:
    with closing(open_library(library["db"])) as conn:
        records, _total = LibraryCatalog(conn).list_all()
    return records


class TestCliBasics:
    def test_version(self) -> None:
        """--version prints the package version."""
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self) -> None:
        """--help names every subcommand."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("import", "ls", "search", "info", "rm", "progress", "watch"):
            assert command in result.output


class TestCliImport:
    """E2e tests for `librarium import`."""

    def test_imports_directory(self, library: dict[str, Path], books_dir: Path) -> None:
        """A directory argument imports every book file inside it."""
        result = _import(library, books_dir)

        assert result.exit_code == 0, result.output
        assert "Found 2 file(s)" in result.output
        assert "2 added" in result.output
        assert sorted(b.title for b in _books(library)) == ["Dune", "Emma"]

    def test_originals_left_in_place(self, library: dict[str, Path], books_dir: Path) -> None:
        """The CLI imports copies; the user's files stay where they were."""
        _import(library, books_dir)
        assert (books_dir / "dune.epub").exists()

    def test_stores_files_and_covers(self, library: dict[str, Path], books_dir: Path) -> None:
        """Books land under the storage root and covers under the covers root."""
        _import(library, books_dir)

        dune = next(b for b in _books(library) if b.title == "Dune")
        assert dune.file_path.parent == (library["books"] / "shelf").resolve()
        assert dune.cover_path is not None
        assert dune.cover_path.parent == library["covers"].resolve()

    def test_reimport_skips_duplicates(self, library: dict[str, Path], books_dir: Path) -> None:
        """Importing the same files again reports them as duplicates."""
        _import(library, books_dir)

        result = _import(library, books_dir, collection="other")

        assert result.exit_code == 0
        assert "2 skipped (duplicate)" in result.output
        assert len(_books(library)) == 2

    def test_unsupported_file_fails(self, library: dict[str, Path], books_dir: Path) -> None:
        """A non-book file is reported as an error with exit code 1."""
        result = _import(library, books_dir / "notes.txt")

        assert result.exit_code == 1
        assert "1 error(s)" in result.output
        assert "Unsupported format" in result.output

    def test_invalid_collection(self, library: dict[str, Path], books_dir: Path) -> None:
        """An unsafe collection id is a usage error."""
        result = _import(library, books_dir, collection="../up")
        assert result.exit_code == 2
        assert "Invalid collection" in result.output


class TestCliQueries:
    """E2e tests for ls, search and info."""

    @pytest.fixture(autouse=True)
    def _imported(self, library: dict[str, Path], books_dir: Path) -> None:
        _import(library, books_dir)

    def test_ls(self, library: dict[str, Path]) -> None:
        """ls shows every book and the total."""
        result = _run(library, "ls")
        assert result.exit_code == 0
        assert "Dune" in result.output
        assert "Emma" in result.output
        assert "2 of 2 book(s)" in result.output

    def test_ls_other_collection_is_empty(self, library: dict[str, Path]) -> None:
        """ls -c filters to one collection."""
        result = _run(library, "ls", "-c", "nowhere")
        assert result.exit_code == 0
        assert "No books in the library." in result.output

    def test_ls_limit(self, library: dict[str, Path]) -> None:
        """--limit pages the listing but keeps the full total."""
        result = _run(library, "ls", "--limit", "1")
        assert "1 of 2 book(s)" in result.output

    def test_search(self, library: dict[str, Path]) -> None:
        """search matches descriptions and shows only hits."""
        result = _run(library, "search", "Highbury")
        assert result.exit_code == 0
        assert "Emma" in result.output
        assert "Dune" not in result.output

    def test_search_no_results(self, library: dict[str, Path]) -> None:
        """A query with no hits says so."""
        result = _run(library, "search", "zeppelin")
        assert "No results found." in result.output

    def test_search_invalid_query(self, library: dict[str, Path]) -> None:
        """Malformed FTS syntax is reported instead of crashing."""
        result = _run(library, "search", '"unbalanced')
        assert result.exit_code == 1
        assert "Invalid search query" in result.output

    def test_info(self, library: dict[str, Path]) -> None:
        """info shows the stored metadata for one book."""
        dune = next(b for b in _books(library) if b.title == "Dune")

        result = _run(library, "info", dune.id)

        assert result.exit_code == 0
        assert "Dune" in result.output
        assert "Frank Herbert" in result.output
        assert "epub" in result.output

    def test_info_missing(self, library: dict[str, Path]) -> None:
        """info on an unknown id exits 1."""
        result = _run(library, "info", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestCliRemoveAndProgress:
    """E2e tests for rm and progress."""

    @pytest.fixture()
    def dune(self, library: dict[str, Path], books_dir: Path) -> BookRecord:
        _import(library, books_dir / "dune.epub")
        return _books(library)[0]

    def test_rm_with_yes(self, library: dict[str, Path], dune: BookRecord) -> None:
        """rm --yes deletes the row and the stored file."""
        result = _run(library, "rm", dune.id, "--yes")

        assert result.exit_code == 0
        assert "Deleted Dune" in result.output
        assert _books(library) == []
        assert not dune.file_path.exists()

    def test_rm_declined(self, library: dict[str, Path], dune: BookRecord) -> None:
        """Answering no at the prompt keeps the book."""
        result = _run(library, "rm", dune.id, input="n\n")

        assert result.exit_code == 1
        assert len(_books(library)) == 1

    def test_rm_missing(self, library: dict[str, Path]) -> None:
        """rm on an unknown id exits 1."""
        result = _run(library, "rm", "nope", "--yes")
        assert result.exit_code == 1

    def test_progress_save_and_read(self, library: dict[str, Path], dune: BookRecord) -> None:
        """A saved position is shown back with its timestamp."""
        saved = _run(library, "progress", dune.id, "42", "-u", "alice")
        shown = _run(library, "progress", dune.id, "-u", "alice")

        assert saved.exit_code == 0
        assert shown.exit_code == 0
        assert "42" in shown.output
        assert "updated" in shown.output

    def test_progress_none_saved(self, library: dict[str, Path], dune: BookRecord) -> None:
        """A user with no saved position gets a message, not an error."""
        result = _run(library, "progress", dune.id, "-u", "bob")
        assert result.exit_code == 0
        assert "No saved position" in result.output

    def test_progress_unknown_book(self, library: dict[str, Path]) -> None:
        """Saving progress for an unknown book exits 1."""
        result = _run(library, "progress", "nope", "7", "-u", "alice")
        assert result.exit_code == 1
        assert "not found" in result.output
