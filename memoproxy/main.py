"""Maintenance CLI for memoproxy stores.

Sets up the Typer application, wires configuration, logging, the console
display and the disk store (Composition Root), and defines commands to
inspect and clear the persistent cache that ``wrap`` uses by default.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from memoproxy.core.keys import CacheSerializationError, decode_record
from memoproxy.domain.models.common import CacheKey
from memoproxy.infrastructure.cli.display import ConsoleDisplay
from memoproxy.infrastructure.config.settings import get_config, get_log_level, load_configuration
from memoproxy.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging
from memoproxy.infrastructure.storage.disk_store import DiskStore, get_default_store, reset_default_store

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="memoproxy",
    help="Inspect and maintain the persistent store behind memoized services.",
    add_completion=False,
)

def create_dependencies(cache_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Loads configuration, configures logging and opens the store.

    Args:
        cache_dir: Store directory; the configured default store is used when None.
    """
    load_configuration()
    setup_logging(
        log_level=get_log_level(),
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
    )
    dependencies: Dict[str, Any] = {'ui': ConsoleDisplay()}
    if cache_dir is not None:
        dependencies['store'] = DiskStore(cache_dir)
        dependencies['close'] = dependencies['store'].close
    else:
        dependencies['store'] = get_default_store()
        dependencies['close'] = reset_default_store
    logger.debug(f"CLI dependencies initialized with store at {dependencies['store'].directory}")
    return dependencies

@app.callback()
def main_callback(
    ctx: typer.Context,
    cache_dir: Annotated[
        Optional[Path],
        typer.Option("--cache-dir", "-d", file_okay=False, help="Store directory (defaults to the configured cache directory).")
    ] = None,
):
    """Opens the store shared by all commands."""
    dependencies = create_dependencies(cache_dir)
    ctx.obj = dependencies
    ctx.call_on_close(dependencies['close'])

@app.command()
def info(ctx: typer.Context):
    """Show where the store lives and how much it holds."""
    ui = ctx.obj['ui']
    store: DiskStore = ctx.obj['store']
    ui.display_stats("memoproxy store", {
        "Directory": store.directory,
        "Entries": len(store),
        "Size on disk": f"{store.volume()} bytes",
    })

@app.command(name="list")
def list_keys(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Maximum number of keys to print.")] = 50,
):
    """List stored cache keys."""
    ui = ctx.obj['ui']
    store: DiskStore = ctx.obj['store']
    shown = 0
    for key in store.keys():
        if shown >= limit:
            ui.display_info(f"Showing first {limit} of {len(store)} keys.")
            break
        ui.display_output(str(key))
        shown += 1
    if shown == 0:
        ui.display_info("The store is empty.")

@app.command()
def show(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Exact cache key, e.g. '{\"args\":[2,3],\"method\":\"add\"}'.")],
):
    """Print the record stored under KEY."""
    ui = ctx.obj['ui']
    store: DiskStore = ctx.obj['store']
    record = store.get(CacheKey(key))
    if record is None:
        ui.display_error(f"No cache entry for key: {key}")
        raise typer.Exit(code=1)
    try:
        value = decode_record(record)
    except CacheSerializationError as e:
        ui.display_warning(f"Stored record is not readable: {e}")
        ui.display_output(str(record))
        return
    ui.display_output(json.dumps({"value": value}, indent=2, sort_keys=True))

@app.command()
def clear(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
):
    """Remove every entry from the store."""
    ui = ctx.obj['ui']
    store: DiskStore = ctx.obj['store']
    if not yes and not ui.ask_yes_no_question(f"Remove all {len(store)} entries from {store.directory}?"):
        ui.display_info("Aborted, nothing removed.")
        return
    count = store.clear()
    ui.display_info(f"Removed {count} entries from {store.directory}.")

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
