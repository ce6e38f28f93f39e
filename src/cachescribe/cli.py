"""Click CLI for cachescribe — inspect and edit a namespace's snapshot."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cachescribe.cache.engine import Cache
from cachescribe.cache.keys import supported_algorithms
from cachescribe.cache.snapshot import SnapshotStore
from cachescribe.config.hierarchy import load_config_hierarchy, options_from_config
from cachescribe.errors.exceptions import CachescribeError

console = Console()
error_console = Console(stderr=True)

_MISSING = object()
_PREVIEW_CHARS = 60


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _open_cache(ctx: click.Context, snapshot: bool = True) -> Cache:
    options = options_from_config(ctx.obj["config"])
    options["snapshot"] = snapshot
    return Cache(**options)


def _fail(message: str) -> NoReturn:
    error_console.print(f"[red]{message}[/red]")
    sys.exit(1)


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


@click.group()
@click.version_option(package_name="cachescribe")
@click.option("--namespace", type=str, default=None, help="Cache namespace.")
@click.option(
    "--directory", type=click.Path(file_okay=False), default=None, help="Snapshot directory."
)
@click.option("--extension", type=str, default=None, help="Snapshot file extension.")
@click.option("--algorithm", type=str, default=None, help="Digest algorithm for file names.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    namespace: str | None,
    directory: str | None,
    extension: str | None,
    algorithm: str | None,
    verbose: int,
) -> None:
    """cachescribe — key-value cache with TTL and file snapshots."""
    config = load_config_hierarchy(
        namespace=namespace,
        directory=directory,
        extension=extension,
        algorithm=algorithm,
    )
    _setup_logging(verbose, str(config.get("log_level", "WARNING")))
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("path")
@click.pass_context
def show_path(ctx: click.Context) -> None:
    """Print the snapshot file path for the namespace."""
    try:
        cache = _open_cache(ctx, snapshot=False)
    except CachescribeError as e:
        _fail(f"Error: {e}")
    console.print(str(cache.path), soft_wrap=True)


@cli.command("list")
@click.pass_context
def list_entries(ctx: click.Context) -> None:
    """List live entries in the snapshot."""
    try:
        cache = _open_cache(ctx, snapshot=False)
        store = SnapshotStore(cache.path, cache.options.namespace, cache.options.transformer)
        entries = store.load()
    except CachescribeError as e:
        _fail(f"Error: {e}")

    table = Table(title=f"Namespace: {cache.options.namespace}", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("TTL (s)")
    table.add_column("Created")
    table.add_column("Value")

    for key, entry in entries.items():
        ttl = "∞" if entry.meta.ttl == 0 else f"{entry.meta.ttl:g}"
        preview = _dumps(entry.value)
        if len(preview) > _PREVIEW_CHARS:
            preview = preview[: _PREVIEW_CHARS - 3] + "..."
        table.add_row(key, ttl, entry.meta.timestamp.isoformat(timespec="seconds"), preview)

    console.print(table)
    console.print(f"{len(entries)} entries")


@cli.command("get")
@click.argument("key")
@click.pass_context
def get_entry(ctx: click.Context, key: str) -> None:
    """Print the value stored under KEY as JSON."""
    try:
        with _open_cache(ctx) as cache:
            value = cache.get(key, _MISSING)
    except CachescribeError as e:
        _fail(f"Error: {e}")
    if value is _MISSING:
        _fail(f"Key not found: {key}")
    console.print(_dumps(value), soft_wrap=True, markup=False, highlight=False)


@cli.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--ttl", type=float, default=None, help="Entry lifetime in seconds (0 = forever).")
@click.option("--raw", is_flag=True, default=False, help="Store VALUE as a string, not JSON.")
@click.pass_context
def set_entry(ctx: click.Context, key: str, value: str, ttl: float | None, raw: bool) -> None:
    """Store VALUE (parsed as JSON unless --raw) under KEY."""
    parsed: Any = value
    if not raw:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            _fail(f"VALUE is not valid JSON ({e}); pass --raw to store it as text")

    try:
        with _open_cache(ctx) as cache:
            cache.set(key, parsed, ttl)
    except CachescribeError as e:
        _fail(f"Error: {e}")
    console.print(f"[green]Stored[/green] {key}")


@cli.command("delete")
@click.argument("key")
@click.pass_context
def delete_entry(ctx: click.Context, key: str) -> None:
    """Remove KEY from the snapshot."""
    try:
        with _open_cache(ctx) as cache:
            removed = cache.delete(key)
    except CachescribeError as e:
        _fail(f"Error: {e}")
    if not removed:
        _fail(f"Key not found: {key}")
    console.print(f"[green]Deleted[/green] {key}")


@cli.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
@click.pass_context
def clear_entries(ctx: click.Context) -> None:
    """Remove all entries from the snapshot."""
    try:
        with _open_cache(ctx) as cache:
            cache.flush()
    except CachescribeError as e:
        _fail(f"Error: {e}")
    console.print("[green]Cache cleared.[/green]")


@cli.command("algorithms")
def list_algorithms() -> None:
    """List digest algorithms usable for snapshot file names."""
    for name in supported_algorithms():
        console.print(name)


def main() -> None:
    """Entry point for the CLI."""
    cli()
