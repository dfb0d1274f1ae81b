"""Tag merging: fold one or more source tags into a destination tag.

For each source tag, in argument order:

1. read its explicit and implicit taggings,
2. apply the same taggings (same kind) to the destination tag,
3. remove the source's taggings,
4. delete the source tag.

Taggings are captured before anything is removed and adds are idempotent, so
a failure part-way leaves the destination already carrying the migrated
taggings and re-running the merge on the remaining sources is safe. There is
no rollback: sources merged before a failure stay merged.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Sequence

from tagsmith.core import Tag, TagStore
from tagsmith.errors import (
    AssociationAddFailed,
    AssociationFetchFailed,
    AssociationRemoveFailed,
    NoSuchTagError,
    SourceEqualsDestinationError,
    TagDeleteFailed,
    TagLookupFailed,
    TooFewArgumentsError,
)
from tagsmith.logging import report_progress

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


def split_merge_args(args: Sequence[str]) -> tuple[list[str], str]:
    """Split ``TAG... DEST`` command arguments into (sources, destination)."""
    if len(args) < 2:
        raise TooFewArgumentsError
    return list(args[:-1]), args[-1]


def _lookup(store: TagStore, name: str, dest_name: str) -> Tag:
    try:
        tag = store.tag_by_name(name)
    except sqlite3.Error as exc:
        raise TagLookupFailed(name, dest_name, exc) from exc
    if tag is None:
        raise NoSuchTagError(name)
    return tag


def _progress(notify: Notify | None, message: str) -> None:
    report_progress(logger, message, notify)


def merge_tags(
    store: TagStore,
    source_names: Sequence[str],
    dest_name: str,
    *,
    notify: Notify | None = None,
) -> list[str]:
    """Merge every tag in *source_names* into *dest_name*.

    Returns the names of the merged (now deleted) source tags.

    Raises:
        TooFewArgumentsError: no source tags given.
        SourceEqualsDestinationError: a source names the destination.
        NoSuchTagError: the destination or a source tag does not exist.
        StoreError: a store step failed; sources before it remain merged.
    """
    if not source_names:
        raise TooFewArgumentsError
    # Checked across the whole list before anything is mutated.
    for source_name in source_names:
        if source_name == dest_name:
            raise SourceEqualsDestinationError(source_name)

    dest = _lookup(store, dest_name, dest_name)

    merged: list[str] = []
    for source_name in source_names:
        source = _lookup(store, source_name, dest_name)
        _merge_one(store, source, dest, notify)
        merged.append(source_name)
    return merged


def _merge_one(store: TagStore, source: Tag, dest: Tag, notify: Notify | None) -> None:
    _progress(notify, f"finding files tagged '{source.name}'.")
    try:
        explicit_file_tags = store.explicit_file_tags_by_tag_id(source.id)
        implicit_file_tags = store.implicit_file_tags_by_tag_id(source.id)
    except sqlite3.Error as exc:
        raise AssociationFetchFailed(source.name, dest.name, exc) from exc

    _progress(notify, f"applying tag '{dest.name}' to these files.")
    try:
        for file_tag in explicit_file_tags:
            store.add_explicit_file_tag(file_tag.file_id, dest.id)
        for file_tag in implicit_file_tags:
            store.add_implicit_file_tag(file_tag.file_id, dest.id)
    except sqlite3.Error as exc:
        raise AssociationAddFailed(source.name, dest.name, exc) from exc

    _progress(notify, f"untagging files '{source.name}'.")
    try:
        store.remove_explicit_file_tags_by_tag_id(source.id)
        store.remove_implicit_file_tags_by_tag_id(source.id)
    except sqlite3.Error as exc:
        raise AssociationRemoveFailed(source.name, dest.name, exc) from exc

    _progress(notify, f"deleting tag '{source.name}'.")
    try:
        store.delete_tag(source.id)
    except (sqlite3.Error, KeyError) as exc:
        raise TagDeleteFailed(source.name, dest.name, exc) from exc
    logger.debug(
        "Merged tag %s into %s (%d explicit, %d implicit taggings)",
        source.name,
        dest.name,
        len(explicit_file_tags),
        len(implicit_file_tags),
    )
