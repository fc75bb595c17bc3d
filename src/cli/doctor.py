"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.connectivity import ConnectivityMonitor
from adapters.json_store import JsonFileStore
from core.config import AppSettings, save_user_settings
from core.domain.errors import StorageError
from core.services.character_cache import CharacterCache
from core.services.favorites_store import FavoritesStore

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_PROBE_KEY = "doctor_probe"


def _check_storage(store: JsonFileStore) -> tuple[bool, str]:
    """Write, read back and delete a probe record."""

    try:
        store.set(_PROBE_KEY, b"{}")
        ok = store.get(_PROBE_KEY) == b"{}"
        store.delete_many([_PROBE_KEY])
    except StorageError as exc:
        return False, str(exc)
    return ok, str(store.root) if ok else "read-back mismatch"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    store = JsonFileStore(settings.storage_dir)

    table = Table(title="Multiverso Hub Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    # Storage
    ok_storage, detail_storage = _check_storage(store)
    table.add_row("Storage", "OK" if ok_storage else "FAIL", detail_storage)

    favorites = FavoritesStore(store)
    favorites.load()
    table.add_row("Favorites", "OK", str(favorites.count))
    snapshot = CharacterCache(store).read_snapshot()
    table.add_row("Offline snapshot", "OK" if snapshot else "EMPTY", f"{len(snapshot)} characters")

    # Connectivity (best-effort)
    online = asyncio.run(ConnectivityMonitor().probe(settings))
    table.add_row("HTTP connectivity", "OK" if online else "FAIL", settings.api_base_url)

    _console.print(table)

    if not online and not snapshot:
        _console.print(
            "\n[yellow]Note:[/yellow] Offline with an empty snapshot: browse once while online to fill it."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    defaults = AppSettings()
    base_url = typer.prompt("API base URL", default=defaults.api_base_url, show_default=True).strip()
    storage_dir = typer.prompt("Storage directory", default=str(defaults.storage_dir), show_default=True).strip()

    if not base_url:
        raise typer.BadParameter("base_url is required")

    env_path = save_user_settings(
        {"api_base_url": base_url, "storage_dir": str(Path(storage_dir).expanduser())}
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
