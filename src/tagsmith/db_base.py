"""Shared utilities and Protocol for store mixins."""

from __future__ import annotations

import os
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _normalize_path(path: str, base: Path) -> str:
    """Absolute, normalized form of *path* used as stable file identity."""
    joined = os.path.join(str(base), os.path.expanduser(path))
    return os.path.normpath(joined)


class DBMixinProtocol(Protocol):
    """Shared attributes that store mixins access via self.

    Mixins inherit this Protocol so mypy can type-check ``self.conn`` without
    ``type: ignore`` on every call. Actual implementations are provided by
    ``TagStore`` at composition time.
    """

    db_path: Path
    base_dir: Path
    _conn: sqlite3.Connection | None

    @property
    def conn(self) -> sqlite3.Connection: ...
