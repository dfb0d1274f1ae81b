"""Core store operations for tagsmith.

Single source of truth for all SQLite operations. The CLI, the merge engine
and the listing orchestrator all go through ``TagStore``.

Convention-based discovery: each project has a `.tagsmith/` directory
containing `tagsmith.db` (SQLite) and `config.json`. The ``TAGSMITH_DB``
environment variable overrides discovery with an explicit database path.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tagsmith.db_files import FilesMixin
from tagsmith.db_schema import CURRENT_SCHEMA_VERSION, SCHEMA_SQL
from tagsmith.db_tags import TagsMixin
from tagsmith.types.core import FileDict, FileTagDict, ISOTimestamp, ProjectConfig, TagDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Convention-based discovery
# ---------------------------------------------------------------------------

TAGSMITH_DIR_NAME = ".tagsmith"
DB_FILENAME = "tagsmith.db"
CONFIG_FILENAME = "config.json"
DB_ENV_VAR = "TAGSMITH_DB"


def find_tagsmith_root(start: Path | None = None) -> Path:
    """Walk up from start (default cwd) looking for .tagsmith/ directory.

    Returns the .tagsmith/ directory path (not the project root).
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / TAGSMITH_DIR_NAME
        if candidate.is_dir():
            return candidate
    msg = f"No {TAGSMITH_DIR_NAME}/ directory found in {current} or any parent"
    raise FileNotFoundError(msg)


def read_config(tagsmith_dir: Path) -> ProjectConfig:
    """Read .tagsmith/config.json. Returns defaults if missing or corrupt."""
    defaults = ProjectConfig(version=1, database=DB_FILENAME)
    config_path = tagsmith_dir / CONFIG_FILENAME
    if not config_path.exists():
        return defaults
    try:
        result: ProjectConfig = json.loads(config_path.read_text())
        return result
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s, using defaults: %s", config_path, exc)
        return defaults


def write_config(tagsmith_dir: Path, config: dict[str, Any] | ProjectConfig) -> None:
    """Write .tagsmith/config.json."""
    config_path = tagsmith_dir / CONFIG_FILENAME
    config_path.write_text(json.dumps(config, indent=2) + "\n")


def resolve_db_path(start: Path | None = None) -> Path:
    """Locate the database: ``$TAGSMITH_DB`` first, then .tagsmith/ discovery.

    Raises FileNotFoundError when neither is available.
    """
    override = os.environ.get(DB_ENV_VAR)
    if override:
        return Path(override).expanduser()
    tagsmith_dir = find_tagsmith_root(start)
    config = read_config(tagsmith_dir)
    return tagsmith_dir / config.get("database", DB_FILENAME)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tag:
    id: int
    name: str

    def to_dict(self) -> TagDict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class File:
    id: int
    path: str
    created_at: str = ""

    def to_dict(self) -> FileDict:
        return {"id": self.id, "path": self.path, "created_at": ISOTimestamp(self.created_at)}


@dataclass(frozen=True)
class FileTag:
    file_id: int
    tag_id: int
    explicit: bool

    def to_dict(self) -> FileTagDict:
        return {"file_id": self.file_id, "tag_id": self.tag_id, "explicit": self.explicit}


# ---------------------------------------------------------------------------
# TagStore
# ---------------------------------------------------------------------------


class TagStore(TagsMixin, FilesMixin):
    """Direct SQLite operations over tags, files and taggings.

    Use as a context manager so the connection is released on every exit path::

        with TagStore(path) as store:
            store.initialize()
            ...
    """

    def __init__(self, db_path: str | Path, *, base_dir: str | Path | None = None) -> None:
        self.db_path = Path(db_path)
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def from_project(cls, project_path: Path | None = None) -> TagStore:
        """Create a TagStore by discovering the database from project_path (or cwd)."""
        store = cls(resolve_db_path(project_path), base_dir=project_path)
        store.initialize()
        return store

    def __enter__(self) -> TagStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), isolation_level="DEFERRED")
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.execute("PRAGMA busy_timeout=5000")
        return self._conn

    def initialize(self) -> None:
        """Create tables on a fresh database and stamp the schema version."""
        current_version = self.get_schema_version()
        if current_version == 0:
            self.conn.executescript(SCHEMA_SQL)
            self.conn.execute(f"PRAGMA user_version = {CURRENT_SCHEMA_VERSION}")
        elif current_version > CURRENT_SCHEMA_VERSION:
            msg = f"Database schema v{current_version} is newer than this tagsmith (v{CURRENT_SCHEMA_VERSION})"
            raise RuntimeError(msg)
        self.conn.commit()

    def get_schema_version(self) -> int:
        """Return the current schema version from PRAGMA user_version."""
        result: int = self.conn.execute("PRAGMA user_version").fetchone()[0]
        return result

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
