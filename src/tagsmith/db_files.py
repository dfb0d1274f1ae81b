"""FilesMixin: tracked files and their explicit/implicit taggings.

All methods access ``self.conn`` via Python's MRO when composed into
``TagStore``. Explicit and implicit taggings share the ``file_tags`` table and
are told apart by the ``explicit`` column, so both kinds can coexist for the
same (file, tag) pair.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from tagsmith.db_base import DBMixinProtocol, _normalize_path, _now_iso
from tagsmith.errors import NoSuchFileError, NotTrackedError

if TYPE_CHECKING:
    from tagsmith.core import File, FileTag, Tag

logger = logging.getLogger(__name__)


def _is_storable(path: str) -> bool:
    """False for paths carrying surrogate escapes, which sqlite cannot bind."""
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class FilesMixin(DBMixinProtocol):
    """Tracked files, file/tag associations and path → tag resolution.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    """

    if TYPE_CHECKING:
        # From TagsMixin
        def _build_tag(self, row: Any) -> Tag: ...

    # -- Build helpers -------------------------------------------------------

    def _build_file(self, row: Any) -> File:
        from tagsmith.core import File

        return File(id=row["id"], path=row["path"], created_at=row["created_at"])

    def _build_file_tag(self, row: Any) -> FileTag:
        from tagsmith.core import FileTag

        return FileTag(file_id=row["file_id"], tag_id=row["tag_id"], explicit=bool(row["explicit"]))

    # -- Files ---------------------------------------------------------------

    def add_file(self, path: str) -> File:
        """Track a file by path, returning the existing record if already tracked."""
        normalized = _normalize_path(path, self.base_dir)
        if not _is_storable(normalized):
            msg = f"'{path}': file name is not valid UTF-8"
            raise ValueError(msg)
        existing = self.file_by_path(normalized)
        if existing is not None:
            return existing
        cursor = self.conn.execute(
            "INSERT INTO files (path, created_at) VALUES (?, ?)",
            (normalized, _now_iso()),
        )
        self.conn.commit()
        rowid = cursor.lastrowid
        if rowid is None:  # pragma: no cover: INSERT always sets lastrowid
            msg = "INSERT did not produce a lastrowid"
            raise RuntimeError(msg)
        logger.debug("Tracking file %s (id=%d)", normalized, rowid)
        return self.get_file(rowid)

    def get_file(self, file_id: int) -> File:
        """Get a tracked file by ID. Raises KeyError if not found."""
        row = self.conn.execute("SELECT * FROM files WHERE id = ?", (file_id,)).fetchone()
        if row is None:
            msg = f"File not found: {file_id}"
            raise KeyError(msg)
        return self._build_file(row)

    def file_by_path(self, path: str) -> File | None:
        """Look up a tracked file by path. Returns None if not tracked."""
        normalized = _normalize_path(path, self.base_dir)
        if not _is_storable(normalized):
            return None
        row = self.conn.execute("SELECT * FROM files WHERE path = ?", (normalized,)).fetchone()
        if row is None:
            return None
        return self._build_file(row)

    # -- Associations by tag -------------------------------------------------

    def _file_tags_by_tag_id(self, tag_id: int, *, explicit: bool) -> list[FileTag]:
        rows = self.conn.execute(
            "SELECT file_id, tag_id, explicit FROM file_tags WHERE tag_id = ? AND explicit = ? ORDER BY file_id",
            (tag_id, int(explicit)),
        ).fetchall()
        return [self._build_file_tag(r) for r in rows]

    def explicit_file_tags_by_tag_id(self, tag_id: int) -> list[FileTag]:
        return self._file_tags_by_tag_id(tag_id, explicit=True)

    def implicit_file_tags_by_tag_id(self, tag_id: int) -> list[FileTag]:
        return self._file_tags_by_tag_id(tag_id, explicit=False)

    def file_tags_by_file_id(self, file_id: int) -> list[FileTag]:
        """Every association (both kinds) for one file."""
        rows = self.conn.execute(
            "SELECT file_id, tag_id, explicit FROM file_tags WHERE file_id = ? ORDER BY tag_id, explicit DESC",
            (file_id,),
        ).fetchall()
        return [self._build_file_tag(r) for r in rows]

    def _add_file_tag(self, file_id: int, tag_id: int, *, explicit: bool) -> bool:
        cursor = self.conn.execute(
            "INSERT OR IGNORE INTO file_tags (file_id, tag_id, explicit) VALUES (?, ?, ?)",
            (file_id, tag_id, int(explicit)),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def add_explicit_file_tag(self, file_id: int, tag_id: int) -> bool:
        """Apply *tag_id* to *file_id* explicitly. Returns False if already applied."""
        return self._add_file_tag(file_id, tag_id, explicit=True)

    def add_implicit_file_tag(self, file_id: int, tag_id: int) -> bool:
        """Record an implicit tagging. Returns False if already recorded."""
        return self._add_file_tag(file_id, tag_id, explicit=False)

    def _remove_file_tags_by_tag_id(self, tag_id: int, *, explicit: bool) -> int:
        cursor = self.conn.execute(
            "DELETE FROM file_tags WHERE tag_id = ? AND explicit = ?",
            (tag_id, int(explicit)),
        )
        self.conn.commit()
        return cursor.rowcount

    def remove_explicit_file_tags_by_tag_id(self, tag_id: int) -> int:
        return self._remove_file_tags_by_tag_id(tag_id, explicit=True)

    def remove_implicit_file_tags_by_tag_id(self, tag_id: int) -> int:
        return self._remove_file_tags_by_tag_id(tag_id, explicit=False)

    # -- Path → tags ---------------------------------------------------------

    def _tracked_file_for_path(self, path: str) -> File:
        """Resolve *path* to a tracked file or raise a NotFoundError subclass."""
        normalized = _normalize_path(path, self.base_dir)
        if not os.path.lexists(normalized):
            raise NoSuchFileError(path)
        if not _is_storable(normalized):
            # Names that are not valid UTF-8 can never have been tracked.
            raise NotTrackedError(path)
        tracked = self.file_by_path(normalized)
        if tracked is None:
            raise NotTrackedError(path)
        return tracked

    def _tags_for_file(self, file_id: int, *, explicit_only: bool) -> list[Tag]:
        sql = "SELECT DISTINCT t.id, t.name FROM tags t JOIN file_tags ft ON ft.tag_id = t.id WHERE ft.file_id = ?"
        if explicit_only:
            sql += " AND ft.explicit = 1"
        rows = self.conn.execute(sql + " ORDER BY t.name", (file_id,)).fetchall()
        return [self._build_tag(r) for r in rows]

    def tags_for_path(self, path: str) -> list[Tag]:
        """Explicit and implicit tags applied to the file at *path*, by name."""
        tracked = self._tracked_file_for_path(path)
        return self._tags_for_file(tracked.id, explicit_only=False)

    def explicit_tags_for_path(self, path: str) -> list[Tag]:
        """Explicitly applied tags for the file at *path*, by name."""
        tracked = self._tracked_file_for_path(path)
        return self._tags_for_file(tracked.id, explicit_only=True)
