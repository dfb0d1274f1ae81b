"""Tagsmith: explicit and implicit file tagging with tag merging."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tagsmith")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from tagsmith.core import File, FileTag, Tag, TagStore

__all__ = ["File", "FileTag", "Tag", "TagStore", "__version__"]
