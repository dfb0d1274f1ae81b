"""TagsMixin: tag identities: lookup, creation, listing, deletion.

All methods access ``self.conn`` via Python's MRO when composed into
``TagStore``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tagsmith.db_base import DBMixinProtocol

if TYPE_CHECKING:
    from tagsmith.core import Tag

logger = logging.getLogger(__name__)

_FORBIDDEN_TAG_CHARS = frozenset("/\\")


class TagsMixin(DBMixinProtocol):
    """Tag lookup, creation, listing and deletion.

    Inherits ``DBMixinProtocol`` for type-safe access to shared attributes.
    """

    # -- Build helpers -------------------------------------------------------

    def _build_tag(self, row: Any) -> Tag:
        from tagsmith.core import Tag

        return Tag(id=row["id"], name=row["name"])

    @staticmethod
    def validate_tag_name(name: str) -> str:
        """Validate a tag name before writing it."""
        if not isinstance(name, str):
            msg = "Tag name must be a string"
            raise ValueError(msg)
        if not name:
            msg = "Tag name cannot be empty"
            raise ValueError(msg)
        if any(ch.isspace() for ch in name):
            msg = f"Tag name '{name}' cannot contain whitespace"
            raise ValueError(msg)
        if any(ch in _FORBIDDEN_TAG_CHARS for ch in name):
            msg = f"Tag name '{name}' cannot contain path separators"
            raise ValueError(msg)
        if name in {".", ".."}:
            msg = f"Tag name '{name}' is reserved"
            raise ValueError(msg)
        return name

    # -- Queries -------------------------------------------------------------

    def tag_by_name(self, name: str) -> Tag | None:
        """Return the tag called *name*, or None if there is none."""
        row = self.conn.execute("SELECT id, name FROM tags WHERE name = ?", (name,)).fetchone()
        if row is None:
            return None
        return self._build_tag(row)

    def tags(self) -> list[Tag]:
        """All known tags, ordered by name."""
        rows = self.conn.execute("SELECT id, name FROM tags ORDER BY name").fetchall()
        return [self._build_tag(r) for r in rows]

    # -- Mutations -----------------------------------------------------------

    def add_tag(self, name: str) -> Tag:
        """Create a tag. Raises ValueError for an invalid or duplicate name."""
        name = self.validate_tag_name(name)
        if self.tag_by_name(name) is not None:
            msg = f"Tag '{name}' already exists"
            raise ValueError(msg)
        cursor = self.conn.execute("INSERT INTO tags (name) VALUES (?)", (name,))
        self.conn.commit()
        rowid = cursor.lastrowid
        if rowid is None:  # pragma: no cover: INSERT always sets lastrowid
            msg = "INSERT did not produce a lastrowid"
            raise RuntimeError(msg)
        logger.debug("Created tag %s (id=%d)", name, rowid)
        from tagsmith.core import Tag

        return Tag(id=rowid, name=name)

    def delete_tag(self, tag_id: int) -> None:
        """Delete a tag identity. Raises KeyError if it does not exist."""
        cursor = self.conn.execute("DELETE FROM tags WHERE id = ?", (tag_id,))
        self.conn.commit()
        if cursor.rowcount == 0:
            msg = f"Tag not found: {tag_id}"
            raise KeyError(msg)
        logger.debug("Deleted tag id=%d", tag_id)
