"""Fonts command - font resolution utilities."""

from __future__ import annotations

import click
from rich.console import Console

from text_wordparser.exceptions import FontNotFoundError
from text_wordparser.fonts import FontCache

console = Console()


@click.group()
def fonts() -> None:
    """Font management commands."""
    pass


@fonts.command("find")
@click.argument("name")
@click.option("--weight", type=int, default=400, help="Font weight (400, 700, etc)")
@click.option("--style", default="normal", help="Font style (normal, italic)")
def find_font(name: str, weight: int, style: str) -> None:
    """Find a specific font by family name."""
    cache = FontCache()

    with console.status(f"[bold green]Searching for '{name}'..."):
        try:
            engine = cache.get_font(name, weight=weight, style=style)
        except FontNotFoundError as e:
            console.print(f"[red]Not found:[/red] {e}")
            raise SystemExit(1) from e

    console.print(f"[green]Found:[/green] {engine.name}")
    console.print(f"[dim]Path:[/dim] {engine.path}")
    console.print(f"[dim]Face index:[/dim] {engine.face_index}")
    console.print(f"[dim]Units per em:[/dim] {engine.units_per_em}")
