"""Shared CLI helpers.

Provides ``get_store()`` and ``fail()`` so the ``cli_commands/*.py`` modules
can reach them without importing ``cli.py``.
"""

from __future__ import annotations

import sqlite3
import sys
from typing import NoReturn

import click

from tagsmith.core import TAGSMITH_DIR_NAME, TagStore, resolve_db_path
from tagsmith.logging import setup_logging


def get_store() -> TagStore:
    """Discover the database and return an initialized TagStore.

    Callers own the returned store and must use it as a context manager.
    """
    try:
        db_path = resolve_db_path()
    except FileNotFoundError:
        click.echo(f"No {TAGSMITH_DIR_NAME}/ found. Run 'tagsmith init' first.", err=True)
        sys.exit(1)
    store = TagStore(db_path)
    try:
        setup_logging(db_path.parent)
        store.initialize()
    except (sqlite3.Error, OSError, RuntimeError) as e:
        store.close()
        fail(f"could not open storage: {e}")
    return store


def fail(message: str) -> NoReturn:
    """Print *message* to stderr and exit non-zero."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)
