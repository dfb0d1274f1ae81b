"""CLI commands for project setup: init."""

from __future__ import annotations

from pathlib import Path

import click

from tagsmith.core import CONFIG_FILENAME, DB_FILENAME, TAGSMITH_DIR_NAME, TagStore, read_config, write_config


@click.command()
def init() -> None:
    """Initialize .tagsmith/ in the current directory."""
    cwd = Path.cwd()
    tagsmith_dir = cwd / TAGSMITH_DIR_NAME

    if tagsmith_dir.exists():
        click.echo(f"{TAGSMITH_DIR_NAME}/ already exists in {cwd}")
        # Still ensure the database is initialized
        config = read_config(tagsmith_dir)
        with TagStore(tagsmith_dir / config.get("database", DB_FILENAME)) as store:
            store.initialize()
        return

    tagsmith_dir.mkdir()
    write_config(tagsmith_dir, {"version": 1, "database": DB_FILENAME})

    with TagStore(tagsmith_dir / DB_FILENAME) as store:
        store.initialize()

    click.echo(f"Initialized {TAGSMITH_DIR_NAME}/ in {cwd}")
    click.echo(f"  Config: {tagsmith_dir / CONFIG_FILENAME}")
    click.echo(f"  Database: {tagsmith_dir / DB_FILENAME}")
