"""CLI command for consolidating tags: merge."""

from __future__ import annotations

import logging

import click

from tagsmith.cli_common import fail, get_store
from tagsmith.errors import ArgumentError, StoreError, TagsmithError
from tagsmith.merge import merge_tags, split_merge_args

logger = logging.getLogger(__name__)


@click.command()
@click.argument("names", metavar="TAG... DEST", nargs=-1)
def merge(names: tuple[str, ...]) -> None:
    """Merge TAGs into tag DEST, resulting in a single tag named DEST."""
    try:
        sources, dest = split_merge_args(names)
    except ArgumentError as e:
        fail(str(e))

    with get_store() as store:
        try:
            merge_tags(store, sources, dest)
        except StoreError as e:
            logger.error(
                "merge failed",
                extra={"command": "merge", "args_data": list(names), "error": str(e.cause)},
            )
            fail(str(e))
        except TagsmithError as e:
            fail(str(e))
