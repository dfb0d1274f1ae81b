# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_base.py, or any mixin; this prevents circular imports.
"""Typed return-value contracts for the tagsmith store."""

from __future__ import annotations

from tagsmith.types.core import (
    FileDict,
    FileTagDict,
    ISOTimestamp,
    ProjectConfig,
    TagDict,
)

__all__ = [
    "FileDict",
    "FileTagDict",
    "ISOTimestamp",
    "ProjectConfig",
    "TagDict",
]
