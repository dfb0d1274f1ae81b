"""Exception hierarchy for tagsmith.

Three families, mirroring how callers treat them:

- ``ArgumentError``: the request itself is malformed. Raised before the store
  is touched.
- ``NotFoundError``: a named tag or path does not exist / is not tracked.
- ``StoreError``: a store primitive failed part-way through a merge. Carries
  the step, the source and destination tag names, and the underlying cause.

Whether an error aborts a command or is downgraded to a warning is decided by
the caller (see ``tagsmith.listing``), never by the error class.
"""

from __future__ import annotations


class TagsmithError(Exception):
    """Base exception for tagsmith."""


# ---------------------------------------------------------------------------
# Argument errors
# ---------------------------------------------------------------------------


class ArgumentError(TagsmithError):
    pass


class TooFewArgumentsError(ArgumentError):
    def __init__(self) -> None:
        super().__init__("too few arguments.")


class SourceEqualsDestinationError(ArgumentError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("source and destination names are the same.")


# ---------------------------------------------------------------------------
# Not-found errors
# ---------------------------------------------------------------------------


class NotFoundError(TagsmithError):
    pass


class NoSuchTagError(NotFoundError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no such tag '{name}'.")


class NoSuchFileError(NotFoundError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"'{path}': no such file.")


class NotTrackedError(NotFoundError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"'{path}': file is not tagged.")


# ---------------------------------------------------------------------------
# Store errors (merge steps)
# ---------------------------------------------------------------------------


class StoreError(TagsmithError):
    """A store primitive failed while merging *source* into *dest*."""

    step = "access the store"

    def __init__(self, source: str, dest: str, cause: BaseException) -> None:
        self.source = source
        self.dest = dest
        self.cause = cause
        super().__init__(f"could not {self.step} while merging tag '{source}' into '{dest}': {cause}")


class AssociationFetchFailed(StoreError):
    step = "retrieve taggings"


class AssociationAddFailed(StoreError):
    step = "apply taggings"


class AssociationRemoveFailed(StoreError):
    step = "remove taggings"


class TagDeleteFailed(StoreError):
    step = "delete tag"


class TagLookupFailed(StoreError):
    step = "retrieve tag"
