"""CLI entry point for noteleaf."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from noteleaf.config import NoteleafConfig, load_config
from noteleaf.config.loader import DEFAULT_CONFIG_TEMPLATE
from noteleaf.leaflet import (
    ConversionError,
    LinearDocument,
    LocalImageResolver,
    MarkdownConverter,
    placeholder_uploader,
)
from noteleaf.leaflet.codec import blocks_from_json, to_record

app = typer.Typer(
    name="noteleaf",
    help="Convert markdown notes to leaflet documents and back.",
)

convert_app = typer.Typer(help="Convert between markdown and leaflet records.")
app.add_typer(convert_app, name="convert")

config_app = typer.Typer(help="Manage noteleaf configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: NoteleafConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LOG_FORMATS = {
    "text": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}',
}


def _get_config() -> NoteleafConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to noteleaf.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=_LOG_LEVELS[_config.log_level],
        format=_LOG_FORMATS[_config.log_format],
    )


def _build_converter(
    cfg: NoteleafConfig, note: Path, images: bool, note_dir: str | None
) -> MarkdownConverter:
    converter = MarkdownConverter.from_config(cfg.converter)
    if not images:
        return converter
    base = note_dir or cfg.converter.note_dir or str(note.parent)
    resolver = LocalImageResolver(
        placeholder_uploader, max_image_bytes=cfg.converter.max_image_bytes
    )
    return converter.with_image_resolver(resolver, base)


def _write_or_echo(content: str, output: str | None) -> None:
    if output:
        Path(output).write_text(content, encoding="utf-8")
        rprint(f"[green]Written to[/green] {output}")
    else:
        typer.echo(content)


@convert_app.command("to-leaflet")
def to_leaflet(
    note: str = typer.Argument(..., help="Markdown note to convert"),
    images: bool | None = typer.Option(
        None, "--images/--no-images", help="Resolve local images (placeholder blobs)"
    ),
    note_dir: Annotated[
        str | None,
        typer.Option("--note-dir", help="Base directory for relative image paths"),
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write the page record to file")
    ] = None,
) -> None:
    """Convert a markdown note into a leaflet page record (JSON)."""
    cfg = _get_config()
    path = Path(note)
    if not path.is_file():
        rprint(f"[red]Error:[/red] File not found: {escape(note)}")
        raise typer.Exit(1)

    do_images = images if images is not None else cfg.converter.resolve_images
    converter = _build_converter(cfg, path, do_images, note_dir)

    try:
        blocks = converter.to_leaflet(path.read_text(encoding="utf-8"))
    except ConversionError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    page = LinearDocument(blocks=blocks)
    _write_or_echo(json.dumps(to_record(page), indent=2), output)


@convert_app.command("from-leaflet")
def from_leaflet(
    record: str = typer.Argument(..., help="Document, page, or block list JSON"),
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write markdown to file")
    ] = None,
) -> None:
    """Render a leaflet record as markdown."""
    cfg = _get_config()
    path = Path(record)
    if not path.is_file():
        rprint(f"[red]Error:[/red] File not found: {escape(record)}")
        raise typer.Exit(1)

    converter = MarkdownConverter.from_config(cfg.converter)
    try:
        blocks = blocks_from_json(path.read_text(encoding="utf-8"))
        markdown = converter.from_leaflet(blocks)
    except ConversionError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _write_or_echo(markdown, output)
    if output:
        rprint(
            Panel(
                f"[dim]Source:[/dim]  {path}\n"
                f"[dim]Blocks:[/dim]  {len(blocks)}",
                title="Conversion Result",
                border_style="green",
            )
        )


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default noteleaf.yaml in current directory."""
    target = Path("noteleaf.yaml")
    if target.exists() and not force:
        rprint("[yellow]noteleaf.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
