"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.catalog import CatalogStats
from core.domain.feed import FeedState, FeedStatus
from core.domain.models import Character, CharacterStatus, Episode

_STATUS_STYLES: dict[CharacterStatus, str] = {
    CharacterStatus.ALIVE: "green",
    CharacterStatus.DEAD: "red",
    CharacterStatus.UNKNOWN: "dim",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("Multiverso Hub", style="bold cyan")
    subtitle = Text("Personajes • Favoritos • Modo offline", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_offline_banner(console: Console) -> None:
    console.print(Panel(Text("Sin conexión: mostrando datos guardados", style="bold"), border_style="yellow"))


def build_characters_table(
    characters: Sequence[Character],
    *,
    favorite_ids: Iterable[int] = (),
    title: str = "Characters",
) -> Table:
    favorites = set(favorite_ids)
    table = Table(title=title)
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="cyan", justify="right", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Status")
    table.add_column("Species", style="magenta")
    table.add_column("Location", style="dim")
    for character in characters:
        table.add_row(
            "♥" if character.id in favorites else "",
            str(character.id),
            character.name,
            Text(character.status.value, style=_STATUS_STYLES[character.status]),
            character.species,
            character.location.name,
        )
    return table


def build_feed_footer(state: FeedState) -> Text:
    text = Text()
    text.append(f"{len(state.items)} characters", style="bold")
    text.append(" • ")
    text.append("online" if state.online else "offline", style="green" if state.online else "yellow")
    if state.status is FeedStatus.ERROR:
        text.append(f" • error: {state.error}", style="red")
    elif state.has_more:
        text.append(f" • more pages available (next: {state.next_page})", style="dim")
    else:
        text.append(" • end of list", style="dim")
    return text


def build_character_panel(character: Character, *, favorite: bool, episodes: Sequence[Episode] = ()) -> Panel:
    body = Text()
    body.append(f"Status: {character.status.value}\n")
    body.append(f"Species: {character.species}")
    if character.type:
        body.append(f" ({character.type})")
    body.append(f"\nGender: {character.gender.value}\n")
    body.append(f"Origin: {character.origin.name}\n")
    body.append(f"Location: {character.location.name}\n")
    body.append(f"Episodes: {len(character.episode)}\n")
    body.append(f"Image: {character.image}", style="dim")
    if episodes:
        body.append("\n\n")
        for episode in episodes:
            body.append(f"{episode.episode}  {episode.name}", style="cyan")
            body.append(f"  {episode.air_date}\n", style="dim")

    title = Text(character.name, style="bold yellow")
    if favorite:
        title.append(" ♥", style="red")
    return Panel(body, title=title, border_style="yellow")


def build_stats_table(stats: CatalogStats) -> Table:
    source = "local snapshot" if stats.from_snapshot else "remote catalog"
    table = Table(title=f"Catalog ({source})")
    table.add_column("Total", style="cyan", justify="right")
    table.add_column("Alive", style=_STATUS_STYLES[CharacterStatus.ALIVE], justify="right")
    table.add_column("Dead", style=_STATUS_STYLES[CharacterStatus.DEAD], justify="right")
    table.add_row(str(stats.total), str(stats.alive), str(stats.dead))
    return table
