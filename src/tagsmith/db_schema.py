"""Database schema definitions for the tagsmith store.

Contains the canonical SQL schema and the current schema version constant.
"""

from __future__ import annotations

SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS tags (
    id    INTEGER PRIMARY KEY AUTOINCREMENT,
    name  TEXT NOT NULL UNIQUE
);

CREATE INDEX IF NOT EXISTS idx_tags_name ON tags(name);

CREATE TABLE IF NOT EXISTS files (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    path        TEXT NOT NULL UNIQUE,
    created_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_files_path ON files(path);

-- One row per (file, tag, kind). The primary key makes taggings a set.
CREATE TABLE IF NOT EXISTS file_tags (
    file_id   INTEGER NOT NULL REFERENCES files(id) ON DELETE CASCADE,
    tag_id    INTEGER NOT NULL REFERENCES tags(id),
    explicit  BOOLEAN NOT NULL,
    PRIMARY KEY (file_id, tag_id, explicit)
);

CREATE INDEX IF NOT EXISTS idx_file_tags_tag ON file_tags(tag_id, explicit);
"""

CURRENT_SCHEMA_VERSION = 1
