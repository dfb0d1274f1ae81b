"""Foundational TypedDicts for dataclass to_dict() returns."""

from __future__ import annotations

from typing import NewType, TypedDict

ISOTimestamp = NewType("ISOTimestamp", str)


class ProjectConfig(TypedDict, total=False):
    """Shape of .tagsmith/config.json."""

    version: int
    database: str


class TagDict(TypedDict):
    id: int
    name: str


class FileDict(TypedDict):
    id: int
    path: str
    created_at: ISOTimestamp


class FileTagDict(TypedDict):
    file_id: int
    tag_id: int
    explicit: bool
