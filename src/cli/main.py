"""Multiverso Hub command line.

Commands are thin: each one builds the application context, calls the core
and renders the result with the helpers in ``cli.ui_components``.
"""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli import doctor
from cli.ui_components import (
    build_character_panel,
    build_characters_table,
    build_feed_footer,
    build_stats_table,
    print_banner,
    print_offline_banner,
)
from core.config import AppSettings
from core.domain.feed import FeedFilters, FeedState
from core.domain.models import CharacterStatus
from core.services.app_context import AppContext, build_app_context

app = typer.Typer(no_args_is_help=True, help="Browse the Rick and Morty character catalog, online or offline.")
favorites_app = typer.Typer(no_args_is_help=True, help="Manage favorite characters.")
theme_app = typer.Typer(no_args_is_help=True, help="Show or change the theme preference.")

app.add_typer(favorites_app, name="favorites")
app.add_typer(theme_app, name="theme")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
    )


async def _open_context(*, offline: bool) -> AppContext:
    ctx = build_app_context(AppSettings(), online=not offline)
    if not offline:
        await ctx.connectivity.probe(ctx.settings)
    return ctx


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override MULTIVERSO_HUB_LOG_LEVEL."),
) -> None:
    configure_logging(log_level or AppSettings().log_level)


async def _browse(filters: FeedFilters, pages: int, offline: bool) -> tuple[FeedState, tuple[int, ...]]:
    ctx = await _open_context(offline=offline)
    feed = ctx.new_feed(filters)
    feed.reset()
    try:
        for _ in range(pages):
            state = await feed.load_next()
            if not state.has_more or state.error:
                break
    finally:
        feed.detach()
    return feed.state, ctx.favorites.ids


@app.command()
def browse(
    status: CharacterStatus | None = typer.Option(None, "--status", "-s", case_sensitive=False, help="Alive, Dead or unknown."),
    name: str | None = typer.Option(None, "--name", "-n", help="Name search (online only)."),
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Pages to load while online."),
    offline: bool = typer.Option(False, "--offline", help="Use the local snapshot only."),
) -> None:
    """List characters, paging the remote catalog or filtering the local snapshot."""

    filters = FeedFilters.build(status=status, name=name)
    state, favorite_ids = asyncio.run(_browse(filters, pages, offline))

    print_banner(_console)
    if not state.online:
        print_offline_banner(_console)
        if filters.name:
            _console.print("[yellow]Name search is not available offline; showing the status filter only.[/yellow]")
    if state.items:
        _console.print(build_characters_table(state.items, favorite_ids=favorite_ids))
    else:
        _console.print("[dim]No characters found.[/dim]")
    _console.print(build_feed_footer(state))
    if state.error:
        raise typer.Exit(code=1)


@app.command()
def show(
    character_id: int = typer.Argument(..., min=1),
    episodes: bool = typer.Option(False, "--episodes", "-e", help="Also fetch the first episodes (online only)."),
    offline: bool = typer.Option(False, "--offline", help="Use the local snapshot only."),
) -> None:
    """Show one character, from the remote catalog or the local snapshot."""

    async def _run():
        ctx = await _open_context(offline=offline)
        return ctx, await ctx.character_detail(character_id, with_episodes=episodes)

    ctx, detail = asyncio.run(_run())
    if not ctx.connectivity.is_online:
        print_offline_banner(_console)
    if detail is None:
        _console.print(f"[red]Character {character_id} is not available.[/red]")
        raise typer.Exit(code=1)
    _console.print(build_character_panel(detail.character, favorite=detail.favorite, episodes=detail.episodes))
    if detail.from_snapshot:
        _console.print("[dim]Shown from the local snapshot.[/dim]")


@app.command()
def stats(offline: bool = typer.Option(False, "--offline", help="Count the local snapshot only.")) -> None:
    """Total, alive and dead characters."""

    async def _run():
        ctx = await _open_context(offline=offline)
        return ctx, await ctx.catalog_stats()

    ctx, catalog = asyncio.run(_run())
    if not ctx.connectivity.is_online:
        print_offline_banner(_console)
    _console.print(build_stats_table(catalog))


@favorites_app.command("add")
def favorites_add(character_id: int = typer.Argument(..., min=1)) -> None:
    ctx = build_app_context(AppSettings())
    ctx.favorites.add(character_id)
    _console.print(f"[green]Added[/green] {character_id} ({ctx.favorites.count} favorites)")


@favorites_app.command("remove")
def favorites_remove(character_id: int = typer.Argument(..., min=1)) -> None:
    ctx = build_app_context(AppSettings())
    ctx.favorites.remove(character_id)
    _console.print(f"[yellow]Removed[/yellow] {character_id} ({ctx.favorites.count} favorites)")


@favorites_app.command("toggle")
def favorites_toggle(character_id: int = typer.Argument(..., min=1)) -> None:
    ctx = build_app_context(AppSettings())
    added = ctx.favorites.toggle(character_id)
    verb = "[green]Added[/green]" if added else "[yellow]Removed[/yellow]"
    _console.print(f"{verb} {character_id} ({ctx.favorites.count} favorites)")


@favorites_app.command("list")
def favorites_list(
    offline: bool = typer.Option(False, "--offline", help="Resolve favorites from the local snapshot."),
    ids_only: bool = typer.Option(False, "--ids", help="Print the ids without resolving characters."),
) -> None:
    """List favorite characters."""

    if ids_only:
        ctx = build_app_context(AppSettings())
        for character_id in ctx.favorites.ids:
            _console.print(str(character_id))
        return

    async def _run():
        ctx = await _open_context(offline=offline)
        return ctx, await ctx.favorite_characters()

    ctx, characters = asyncio.run(_run())
    if not ctx.connectivity.is_online:
        print_offline_banner(_console)
    if not ctx.favorites.ids:
        _console.print("[dim]No favorites yet.[/dim]")
        return
    title = f"{ctx.favorites.count} {'Favorite' if ctx.favorites.count == 1 else 'Favorites'}"
    _console.print(build_characters_table(characters, favorite_ids=ctx.favorites.ids, title=title))
    missing = ctx.favorites.count - len(characters)
    if missing > 0:
        _console.print(f"[dim]{missing} favorite(s) could not be resolved.[/dim]")


@favorites_app.command("clear")
def favorites_clear() -> None:
    ctx = build_app_context(AppSettings())
    ctx.favorites.clear()
    _console.print("[yellow]Favorites cleared[/yellow]")


@theme_app.command("show")
def theme_show() -> None:
    ctx = build_app_context(AppSettings())
    _console.print(ctx.theme.load().label())


@theme_app.command("toggle")
def theme_toggle() -> None:
    ctx = build_app_context(AppSettings())
    _console.print(ctx.theme.toggle().label())


@app.command("clear-all")
def clear_all(yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation.")) -> None:
    """Delete favorites, the character snapshot and the theme preference."""

    if not yes:
        typer.confirm("Delete all local data?", abort=True)
    ctx = build_app_context(AppSettings())
    if not ctx.clear_all():
        _console.print("[red]Could not clear local data (see log).[/red]")
        raise typer.Exit(code=1)
    _console.print("[green]Local data cleared[/green]")


def run() -> None:
    app()
