"""CLI for tagsmith.

Convention-based: discovers .tagsmith/ by walking up from cwd, unless
``TAGSMITH_DB`` names a database file directly.

Usage:
    tagsmith init                        # Initialize .tagsmith/ in cwd
    tagsmith tag photo.jpg holiday beach # Apply tags to a file
    tagsmith tags                        # Tags for entries in cwd
    tagsmith tags photo.jpg              # Tags for one file
    tagsmith tags --explicit a.txt b.txt # Explicit tags for several files
    tagsmith tags --all                  # Every tag defined
    tagsmith merge beach seaside coast   # Fold beach and seaside into coast
"""

from __future__ import annotations

import click

from tagsmith import __version__
from tagsmith.cli_commands.admin import init
from tagsmith.cli_commands.merge import merge
from tagsmith.cli_commands.tagging import tag, tags
from tagsmith.logging import set_verbose

COMMANDS: tuple[click.Command, ...] = (init, tag, tags, merge)


@click.group()
@click.version_option(version=__version__, prog_name="tagsmith")
@click.option("--verbose", "-v", is_flag=True, help="Show progress messages on stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Tagsmith: tag files, list their tags and merge tags."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    set_verbose(verbose)


for _command in COMMANDS:
    cli.add_command(_command)


if __name__ == "__main__":
    cli()
