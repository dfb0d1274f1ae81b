"""Tests for merging tags."""

from __future__ import annotations

import sqlite3

import pytest

from tagsmith.core import TagStore
from tagsmith.errors import (
    AssociationAddFailed,
    AssociationFetchFailed,
    AssociationRemoveFailed,
    NoSuchTagError,
    NotFoundError,
    SourceEqualsDestinationError,
    StoreError,
    TagDeleteFailed,
    TooFewArgumentsError,
)
from tagsmith.merge import merge_tags, split_merge_args
from tests._store_factory import tag_file


def _files_for(store: TagStore, name: str) -> tuple[set[int], set[int]]:
    """(explicit file ids, implicit file ids) currently carrying tag *name*."""
    tag = store.tag_by_name(name)
    assert tag is not None
    return (
        {ft.file_id for ft in store.explicit_file_tags_by_tag_id(tag.id)},
        {ft.file_id for ft in store.implicit_file_tags_by_tag_id(tag.id)},
    )


def _row_count(store: TagStore) -> int:
    return int(store.conn.execute("SELECT COUNT(*) FROM file_tags").fetchone()[0])


class TestSplitArgs:
    def test_last_argument_is_destination(self) -> None:
        assert split_merge_args(["a", "b", "c"]) == (["a", "b"], "c")

    @pytest.mark.parametrize("args", [[], ["only"]])
    def test_too_few(self, args: list[str]) -> None:
        with pytest.raises(TooFewArgumentsError):
            split_merge_args(args)


class TestMergeHappyPath:
    def test_union_of_disjoint_sources(self, store: TagStore) -> None:
        a1 = tag_file(store, "a1.txt", explicit=["A"])
        a2 = tag_file(store, "a2.txt", implicit=["A"])
        b1 = tag_file(store, "b1.txt", explicit=["B"])
        store.add_tag("C")

        merged = merge_tags(store, ["A", "B"], "C")

        assert merged == ["A", "B"]
        assert store.tag_by_name("A") is None
        assert store.tag_by_name("B") is None
        explicit, implicit = _files_for(store, "C")
        assert explicit == {a1.id, b1.id}
        assert implicit == {a2.id}

    def test_kind_is_preserved(self, store: TagStore) -> None:
        f = tag_file(store, "f.txt", explicit=["old"], implicit=["old"])
        store.add_tag("new")
        merge_tags(store, ["old"], "new")
        assert [(ft.file_id, ft.explicit) for ft in store.file_tags_by_file_id(f.id)] == [
            (f.id, True),
            (f.id, False),
        ]

    def test_existing_destination_taggings_not_duplicated(self, store: TagStore) -> None:
        tag_file(store, "f.txt", explicit=["old", "new"])
        merge_tags(store, ["old"], "new")
        assert _row_count(store) == 1
        assert [t.name for t in store.tags_for_path("f.txt")] == ["new"]

    def test_source_without_taggings_is_just_deleted(self, store: TagStore) -> None:
        store.add_tag("empty")
        store.add_tag("dest")
        merge_tags(store, ["empty"], "dest")
        assert [t.name for t in store.tags()] == ["dest"]

    def test_progress_notices(self, store: TagStore) -> None:
        store.add_tag("src")
        store.add_tag("dst")
        notices: list[str] = []
        merge_tags(store, ["src"], "dst", notify=notices.append)
        assert notices == [
            "finding files tagged 'src'.",
            "applying tag 'dst' to these files.",
            "untagging files 'src'.",
            "deleting tag 'src'.",
        ]


class TestMergeValidation:
    def test_no_sources(self, store: TagStore) -> None:
        store.add_tag("C")
        with pytest.raises(TooFewArgumentsError):
            merge_tags(store, [], "C")

    def test_missing_destination(self, store: TagStore) -> None:
        store.add_tag("A")
        with pytest.raises(NoSuchTagError) as exc_info:
            merge_tags(store, ["A"], "ghost")
        assert exc_info.value.name == "ghost"
        assert store.tag_by_name("A") is not None

    def test_missing_source(self, store: TagStore) -> None:
        store.add_tag("C")
        with pytest.raises(NoSuchTagError, match="'ghost'"):
            merge_tags(store, ["ghost"], "C")

    @pytest.mark.parametrize("sources", [["C", "X"], ["X", "C"], ["X", "C", "Y"]])
    def test_source_equals_destination_before_any_mutation(self, store: TagStore, sources: list[str]) -> None:
        tag_file(store, "x.txt", explicit=["X"])
        tag_file(store, "y.txt", explicit=["Y"])
        store.add_tag("C")
        with pytest.raises(SourceEqualsDestinationError):
            merge_tags(store, sources, "C")
        assert {t.name for t in store.tags()} == {"C", "X", "Y"}
        assert _files_for(store, "C") == (set(), set())

    def test_merging_again_after_merge_is_not_found(self, store: TagStore) -> None:
        tag_file(store, "a.txt", explicit=["A"])
        store.add_tag("C")
        merge_tags(store, ["A"], "C")
        with pytest.raises(NotFoundError):
            merge_tags(store, ["A"], "C")
        assert _row_count(store) == 1

    def test_later_missing_source_keeps_earlier_merges(self, store: TagStore) -> None:
        a = tag_file(store, "a.txt", explicit=["A"])
        store.add_tag("C")
        with pytest.raises(NoSuchTagError):
            merge_tags(store, ["A", "ghost"], "C")
        assert store.tag_by_name("A") is None
        assert _files_for(store, "C") == ({a.id}, set())


class _FailingStore:
    """Wraps a TagStore and makes one method raise sqlite3.OperationalError."""

    def __init__(self, store: TagStore, method: str, *, after: int = 0) -> None:
        self._store = store
        self._method = method
        self._remaining = after

    def __getattr__(self, name: str) -> object:
        attr = getattr(self._store, name)
        if name != self._method:
            return attr

        def failing(*args: object, **kwargs: object) -> object:
            if self._remaining > 0:
                self._remaining -= 1
                return attr(*args, **kwargs)
            raise sqlite3.OperationalError("disk I/O error")

        return failing


class TestMergeStoreFailures:
    @pytest.mark.parametrize(
        ("method", "error_type"),
        [
            ("explicit_file_tags_by_tag_id", AssociationFetchFailed),
            ("implicit_file_tags_by_tag_id", AssociationFetchFailed),
            ("add_explicit_file_tag", AssociationAddFailed),
            ("add_implicit_file_tag", AssociationAddFailed),
            ("remove_explicit_file_tags_by_tag_id", AssociationRemoveFailed),
            ("remove_implicit_file_tags_by_tag_id", AssociationRemoveFailed),
            ("delete_tag", TagDeleteFailed),
        ],
    )
    def test_step_failure_is_wrapped(self, store: TagStore, method: str, error_type: type[StoreError]) -> None:
        tag_file(store, "f.txt", explicit=["src"], implicit=["src"])
        store.add_tag("dst")
        failing = _FailingStore(store, method)
        with pytest.raises(error_type) as exc_info:
            merge_tags(failing, ["src"], "dst")  # type: ignore[arg-type]
        err = exc_info.value
        assert err.source == "src"
        assert err.dest == "dst"
        assert isinstance(err.cause, sqlite3.OperationalError)
        assert "'src'" in str(err) and "'dst'" in str(err) and "disk I/O error" in str(err)

    def test_failure_after_adds_keeps_destination_taggings(self, store: TagStore) -> None:
        f = tag_file(store, "f.txt", explicit=["src"])
        store.add_tag("dst")
        with pytest.raises(AssociationRemoveFailed):
            merge_tags(_FailingStore(store, "remove_explicit_file_tags_by_tag_id"), ["src"], "dst")  # type: ignore[arg-type]
        assert _files_for(store, "dst") == ({f.id}, set())
        assert store.tag_by_name("src") is not None

        # Resuming on the same store completes without duplicates.
        merge_tags(store, ["src"], "dst")
        assert store.tag_by_name("src") is None
        assert _row_count(store) == 1

    def test_earlier_sources_stay_merged_when_a_later_one_fails(self, store: TagStore) -> None:
        tag_file(store, "a.txt", explicit=["A"])
        tag_file(store, "b.txt", explicit=["B"])
        store.add_tag("C")
        failing = _FailingStore(store, "delete_tag", after=1)
        with pytest.raises(TagDeleteFailed) as exc_info:
            merge_tags(failing, ["A", "B"], "C")  # type: ignore[arg-type]
        assert exc_info.value.source == "B"
        assert store.tag_by_name("A") is None
        assert store.tag_by_name("B") is not None
        assert len(_files_for(store, "C")[0]) == 2

    def test_lookup_failure_is_store_error(self, store: TagStore) -> None:
        store.add_tag("src")
        store.add_tag("dst")
        with pytest.raises(StoreError):
            merge_tags(_FailingStore(store, "tag_by_name"), ["src"], "dst")  # type: ignore[arg-type]
