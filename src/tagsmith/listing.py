"""Tag resolution and the ``tags`` listing modes.

Mode policy:

- ``all_tags``: every tag name, one per line. Store failures propagate.
- no paths: scan the working directory. Entries that fail to resolve, or
  resolve to no tags, are skipped without output.
- one path: resolution failure propagates; tags are printed one per line.
- several paths: failures become warnings and the path is skipped; every
  resolved path gets a ``"<path>: <tags>"`` line, even with no tags.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from tagsmith.core import Tag, TagStore
from tagsmith.errors import NotFoundError
from tagsmith.logging import report_progress

logger = logging.getLogger(__name__)

Warn = Callable[[str], None]
Notify = Callable[[str], None]

# Per-item failures that best-effort modes downgrade to warnings.
_SKIPPABLE = (NotFoundError, sqlite3.Error)


def resolve_tags(store: TagStore, path: str, explicit_only: bool = False) -> list[Tag]:
    """Effective tags for *path*, ordered by name.

    Raises NoSuchFileError / NotTrackedError when *path* is not a tracked file.
    """
    if explicit_only:
        return store.explicit_tags_for_path(path)
    return store.tags_for_path(path)


def tag_line(tags: Iterable[Tag]) -> str:
    return " ".join(tag.name for tag in tags)


def list_tags(
    store: TagStore,
    paths: Sequence[str],
    *,
    explicit_only: bool = False,
    all_tags: bool = False,
    cwd: Path | None = None,
    warn: Warn | None = None,
    notify: Notify | None = None,
) -> list[str]:
    """Return the output lines for one ``tags`` invocation."""
    if all_tags:
        report_progress(logger, "retrieving all tags.", notify)
        return [tag.name for tag in store.tags()]

    if not paths:
        return _list_directory(store, cwd or Path.cwd(), explicit_only, notify)
    if len(paths) == 1:
        report_progress(logger, f"'{paths[0]}': retrieving tags.", notify)
        return [tag.name for tag in resolve_tags(store, paths[0], explicit_only)]
    return _list_paths(store, paths, explicit_only, warn, notify)


def _list_paths(
    store: TagStore,
    paths: Sequence[str],
    explicit_only: bool,
    warn: Warn | None,
    notify: Notify | None,
) -> list[str]:
    lines: list[str] = []
    for path in paths:
        report_progress(logger, f"'{path}': retrieving tags.", notify)
        try:
            tags = resolve_tags(store, path, explicit_only)
        except _SKIPPABLE as exc:
            logger.warning("'%s': skipped: %s", path, exc)
            if warn is not None:
                warn(str(exc))
            continue
        lines.append(f"{path}: {tag_line(tags)}")
    return lines


def _list_directory(store: TagStore, directory: Path, explicit_only: bool, notify: Notify | None) -> list[str]:
    # Plain sorted() compares by code point, independent of locale.
    names = sorted(os.listdir(directory))
    lines: list[str] = []
    for name in names:
        report_progress(logger, f"'{name}': retrieving tags.", notify)
        try:
            tags = resolve_tags(store, str(directory / name), explicit_only)
        except _SKIPPABLE as exc:
            logger.debug("'%s': skipped: %s", name, exc)
            continue
        if not tags:
            continue
        lines.append(f"{name}: {tag_line(tags)}")
    return lines
