# ABOUTME: SQL DDL for the Librarium catalog: books, FTS5 shadow index, reading progress.
# ABOUTME: SCHEMA_V1 creates the catalog; MIGRATIONS are applied in version order afterwards.

SCHEMA_V1 = """
-- Core book catalog table. Rows are immutable after insert.
CREATE TABLE books (
    id             TEXT PRIMARY KEY,
    collection_id  TEXT NOT NULL,
    title          TEXT NOT NULL,
    author         TEXT,
    format         TEXT NOT NULL,
    file_path      TEXT NOT NULL,
    cover_path     TEXT,
    description    TEXT,
    series         TEXT,
    series_index   REAL,
    tags           TEXT,
    isbn           TEXT,
    published_at   TEXT,
    page_count     INTEGER,
    file_size      INTEGER,
    language       TEXT,
    content_hash   TEXT NOT NULL,
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE UNIQUE INDEX idx_books_content_hash ON books(content_hash);
CREATE UNIQUE INDEX idx_books_file_path ON books(file_path);
CREATE INDEX idx_books_collection ON books(collection_id, title);
CREATE INDEX idx_books_isbn ON books(isbn) WHERE isbn IS NOT NULL;

-- FTS5 shadow index over the searchable columns
CREATE VIRTUAL TABLE books_fts USING fts5(
    title, author, description, tags, series,
    content='books',
    content_rowid='rowid',
    tokenize='porter ascii'
);

-- Triggers run inside the writing statement's transaction, so the index
-- never disagrees with the catalog once a write commits.
CREATE TRIGGER books_ai AFTER INSERT ON books BEGIN
    INSERT INTO books_fts(rowid, title, author, description, tags, series)
    VALUES (new.rowid, new.title, new.author, new.description, new.tags, new.series);
END;

CREATE TRIGGER books_ad AFTER DELETE ON books BEGIN
    INSERT INTO books_fts(books_fts, rowid, title, author, description, tags, series)
    VALUES ('delete', old.rowid, old.title, old.author, old.description, old.tags, old.series);
END;

CREATE TRIGGER books_au AFTER UPDATE ON books BEGIN
    INSERT INTO books_fts(books_fts, rowid, title, author, description, tags, series)
    VALUES ('delete', old.rowid, old.title, old.author, old.description, old.tags, old.series);
    INSERT INTO books_fts(rowid, title, author, description, tags, series)
    VALUES (new.rowid, new.title, new.author, new.description, new.tags, new.series);
END;

CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

# position holds an EPUB CFI or a page number (as text) for PDF/comics
MIGRATION_V2 = """
CREATE TABLE reading_progress (
    user_id     TEXT NOT NULL,
    book_id     TEXT NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    position    TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
    PRIMARY KEY (user_id, book_id)
);

CREATE INDEX idx_progress_user ON reading_progress(user_id, updated_at);

INSERT INTO schema_version (version) VALUES (2);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
]

LATEST_VERSION = max(version for version, _ in MIGRATIONS)
