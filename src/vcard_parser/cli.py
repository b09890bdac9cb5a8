from __future__ import annotations

import logging
from pathlib import Path

import typer
import vobject
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from .card import VCard
from .config import load_settings, write_default_config
from .errors import VCardError
from .model import Mode, MultiText, Nested, PropertyValue, Structured, Typed
from .summary import summarize_json

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="vcard-parser: inspect, summarise and re-export vCard files.",
)
console = Console()
err_console = Console(stderr=True)

_state: dict[str, object] = {"collapse": False}


@app.callback()
def main(
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file"),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    settings = load_settings(config)
    level = (log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    _state["collapse"] = settings.collapse


# ── Helpers ────────────────────────────────────────────────────────────────────

def _load(path: Path, collapse: bool | None = None) -> VCard:
    effective = bool(_state["collapse"]) if collapse is None else collapse
    try:
        return VCard(path, collapse=effective)
    except VCardError as exc:
        err_console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2)


def _cards(card: VCard) -> list[VCard]:
    return list(card) if card.mode is Mode.MULTIPLE else [card]


def _render(entry: PropertyValue) -> str:
    if isinstance(entry, Structured):
        parts = ", ".join(f"{k}={v}" for k, v in entry.parts.items() if v)
        return parts + (f"  ({', '.join(entry.type)})" if entry.type else "")
    if isinstance(entry, Typed):
        extra = [*entry.type, *([f"encoding={entry.encoding}"] if entry.encoding else [])]
        value = entry.value if len(entry.value) <= 60 else entry.value[:57] + "..."
        return value + (f"  ({', '.join(extra)})" if extra else "")
    if isinstance(entry, MultiText):
        return ", ".join(entry.values)
    if isinstance(entry, Nested):
        return f"<{len(entry.records)} embedded card(s)>"
    return entry.value


def _card_table(card: VCard, title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold", title_justify="left")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    for key in card.keys():
        found = card.get(key)
        for entry in found if isinstance(found, list) else [found]:
            table.add_row(key.upper(), Text(_render(entry)))
    return table


# ── Commands ───────────────────────────────────────────────────────────────────

@app.command()
def show(
    path: Path = typer.Argument(..., help="vCard file to read"),
    collapse: bool | None = typer.Option(None, "--collapse/--no-collapse"),
    as_json: bool = typer.Option(False, "--json", help="Print the contact summary as JSON"),
) -> None:
    """Print every property of every card in a file."""
    card = _load(path, collapse)
    if as_json:
        typer.echo(summarize_json(card))
        return
    cards = _cards(card)
    for i, single in enumerate(cards, 1):
        console.print(_card_table(single, f"Card {i}/{len(cards)}"))


@app.command()
def count(path: Path = typer.Argument(..., help="vCard file to read")) -> None:
    """Print the number of cards in a file."""
    typer.echo(_load(path).count())


@app.command()
def export(
    path: Path = typer.Argument(..., help="vCard file to read"),
    output: Path = typer.Argument(..., help="Where to write the vCard 3.0 output"),
    verify: bool = typer.Option(False, "--verify", help="Re-read the output with vobject"),
) -> None:
    """Re-serialise a file as vCard 3.0 (photos and parameters other than TYPE are dropped)."""
    card = _load(path)
    text = card.serialize()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"[bold green]✓ Wrote {card.count()} card(s) → {output}[/bold green]")

    if verify:
        try:
            found = sum(
                1 for comp in vobject.readComponents(text) if comp.name.upper() == "VCARD"
            )
        except vobject.base.ParseError as exc:
            err_console.print(f"[bold red]Output does not parse: {exc}[/bold red]")
            raise typer.Exit(code=1)
        if found != card.count():
            err_console.print(
                f"[bold red]Expected {card.count()} card(s) in output, vobject read {found}[/bold red]"
            )
            raise typer.Exit(code=1)
        console.print("[dim]Verified with vobject.[/dim]")


@app.command()
def extract(
    path: Path = typer.Argument(..., help="vCard file to read"),
    key: str = typer.Argument(..., help="PHOTO, LOGO or SOUND"),
    target: Path = typer.Argument(..., help="Output file"),
    index: int = typer.Option(0, "--index", "-i", help="Which entry of KEY"),
    card_no: int = typer.Option(1, "--card", help="Card number in a multi-card file"),
) -> None:
    """Save an embedded file (e.g. a base64 PHOTO) to disk."""
    cards = _cards(_load(path))
    if not 1 <= card_no <= len(cards):
        err_console.print(f"[bold red]No card {card_no} (file has {len(cards)})[/bold red]")
        raise typer.Exit(code=2)
    try:
        saved = cards[card_no - 1].save_file(key, index, target)
    except VCardError as exc:
        err_console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2)
    if not saved:
        err_console.print(f"[yellow]No embedded {key.upper()}[{index}] to save.[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]✓ Saved {key.upper()} → {target}[/bold green]")


@app.command("init-config")
def init_config(conf: Path = typer.Argument(Path("vcard-parser.toml"))) -> None:
    """Write a settings file with default values."""
    if write_default_config(conf):
        console.print(f"[green]Created {conf}[/green]")
    else:
        console.print(f"[dim]{conf} already exists, left unchanged.[/dim]")


if __name__ == "__main__":
    app()
