"""Words command - segment text and show the resulting words."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from text_wordparser.api import SegmentationResult, WordSegmenter
from text_wordparser.config import Config
from text_wordparser.exceptions import WordParserError
from text_wordparser.fonts.engine import TTFontEngine

console = Console()


def _flags(result: SegmentationResult, index: int) -> str:
    word = result.words[index]
    if word.newline:
        return f"newline(run={word.newline_block_index})"
    return "unfinished" if word.unfinished else ""


def result_to_dict(result: SegmentationResult) -> dict:
    return {
        "text": result.text,
        "words": [
            {
                "start": start,
                "end": end,
                "text": result.text[start:end],
                "width": word.f_width,
                "rbearing": word.f_rbearing,
                "rpadding": word.f_rpadding,
                "unfinished": word.unfinished,
                "newline": word.newline,
                "newline_block_index": word.newline_block_index if word.newline else None,
            }
            for word, (start, end) in zip(result.words, result.ranges())
        ],
    }


@click.command()
@click.argument("text", required=False)
@click.option(
    "--file",
    "-f",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read text from a UTF-8 file",
)
@click.option(
    "--font",
    "font_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Font file to shape with",
)
@click.option("--family", help="Font family resolved through fontconfig")
@click.option("--size", type=float, help="Font size in pixels")
@click.option("--min-resize-width", type=float, help="Split unbreakable words wider than this (px)")
@click.option("--json", "as_json", is_flag=True, help="Print words as JSON")
@click.pass_context
def words(
    ctx: click.Context,
    text: str | None,
    input_file: Path | None,
    font_path: Path | None,
    family: str | None,
    size: float | None,
    min_resize_width: float | None,
    as_json: bool,
) -> None:
    """Segment TEXT into words and print their metrics."""
    config: Config = ctx.obj.get("config", Config())

    if input_file is not None:
        text = input_file.read_text(encoding="utf-8")
    if text is None:
        console.print("[red]Error:[/red] No text given (pass TEXT or --file)")
        raise SystemExit(1)

    if family:
        config.font_family = family
        config.font_path = None
    if font_path:
        config.font_path = font_path
    if size:
        config.font_size = size

    try:
        font = (
            TTFontEngine.from_path(config.font_path, size=config.font_size)
            if config.font_path
            else None
        )
        segmenter = WordSegmenter(font=font, config=config, min_resize_width=min_resize_width)
        result = segmenter.segment(text)
    except WordParserError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    if as_json:
        click.echo(json.dumps(result_to_dict(result), ensure_ascii=False, indent=2))
        return

    table = Table(title=f"{len(result.words)} words")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("Text", style="cyan")
    table.add_column("Width", style="yellow", justify="right")
    table.add_column("RBearing", justify="right")
    table.add_column("RPadding", justify="right")
    table.add_column("Flags", style="green")

    for index, (word, (start, end)) in enumerate(zip(result.words, result.ranges())):
        table.add_row(
            str(index),
            str(start),
            repr(result.text[start:end]),
            f"{word.f_width:.2f}",
            f"{word.f_rbearing:.2f}",
            f"{word.f_rpadding:.2f}",
            _flags(result, index),
        )
    console.print(table)
