"""CLI commands for applying and listing tags: tag, tags."""

from __future__ import annotations

import logging
import os
import sqlite3

import click

from tagsmith.cli_common import fail, get_store
from tagsmith.errors import TagsmithError
from tagsmith.listing import list_tags
from tagsmith.logging import report_progress

logger = logging.getLogger(__name__)


@click.command()
@click.argument("file")
@click.argument("tag_names", metavar="TAG...", nargs=-1, required=True)
def tag(file: str, tag_names: tuple[str, ...]) -> None:
    """Explicitly apply TAGs to FILE, creating tags that do not exist yet."""
    with get_store() as store:
        if not os.path.lexists(file):
            fail(f"'{file}': no such file.")
        # Reject the whole command before anything is written.
        try:
            for name in tag_names:
                store.validate_tag_name(name)
        except ValueError as e:
            fail(str(e))
        try:
            tracked = store.add_file(file)
            for name in tag_names:
                existing = store.tag_by_name(name)
                if existing is None:
                    existing = store.add_tag(name)
                    report_progress(logger, f"new tag '{name}'.")
                store.add_explicit_file_tag(tracked.id, existing.id)
        except ValueError as e:
            fail(str(e))
        except sqlite3.Error as e:
            logger.error("tag failed", extra={"command": "tag", "args_data": [file, *tag_names], "error": str(e)})
            fail(f"could not tag '{file}': {e}")


@click.command()
@click.argument("paths", metavar="[FILE]...", nargs=-1)
@click.option("--all", "-a", "all_tags", is_flag=True, help="List all of the tags defined")
@click.option("--explicit", "-e", "explicit_only", is_flag=True, help="Show only explicitly applied tags")
def tags(paths: tuple[str, ...], all_tags: bool, explicit_only: bool) -> None:
    """List the tags applied to FILEs.

    With no FILE, tags for the entries of the current directory are listed.
    """
    with get_store() as store:
        try:
            lines = list_tags(
                store,
                paths,
                explicit_only=explicit_only,
                all_tags=all_tags,
                warn=lambda message: click.echo(f"Warning: {message}", err=True),
            )
        except TagsmithError as e:
            fail(str(e))
        except sqlite3.Error as e:
            fail(f"could not retrieve tags: {e}")
        except OSError as e:
            fail(f"could not list working directory contents: {e}")
        for line in lines:
            click.echo(line)
