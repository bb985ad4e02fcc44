#!/usr/bin/env python3
"""
CLI interface for the scanned bank statement interpreter.
"""
import logging
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .core.detectors import LayoutRegistry, default_layout
from .core.loader import DEFAULT_LANG, DEFAULT_SCALE
from .core.runner import parse_statement_sync, StatementInterpreter
from .exceptions import BankscanError
from .models.schema import StatementSummary, DocumentResult

app = typer.Typer(help="Scanned bank statement interpreter")
console = Console()


def _configure_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def print_summary(summary: StatementSummary):
    """Render a summary as rich tables."""
    info = Table(show_header=False)
    info.add_row("Name", escape(summary.identity.name))
    info.add_row("Address", escape(summary.identity.address))
    info.add_row("Total Deposits", f"${summary.total_deposits:.2f}")
    info.add_row("Total ATM Withdrawals", f"${summary.total_atm_withdrawals:.2f}")
    console.print(info)

    if summary.purchases:
        purchases = Table(title="Walmart Purchases")
        purchases.add_column("Date")
        purchases.add_column("Description")
        purchases.add_column("Amount", justify="right")
        for purchase in summary.purchases:
            purchases.add_row(escape(purchase.date), escape(purchase.description), f"${purchase.amount:.2f}")
        console.print(purchases)


def _read_text_file(text_path: Path) -> str:
    """Read a recognized text file, exiting with an error message if it is unusable."""
    if not text_path.exists():
        console.print(f"[red]Error: text file not found: {escape(str(text_path))}[/red]")
        raise typer.Exit(1)
    try:
        return text_path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        console.print(f"[red]Error: text file is not valid UTF-8: {escape(str(text_path))} ({e.reason})[/red]")
        raise typer.Exit(1)


def _emit(result, output: Optional[Path], table: bool, summary: StatementSummary):
    if output:
        output.write_text(result.model_dump_json(indent=2))
        console.print(f"[green]✓ Output written to: {output}[/green]")
    elif table:
        print_summary(summary)
    else:
        console.print_json(result.model_dump_json(indent=2))


@app.command()
def parse(
    pdf_path: Path = typer.Argument(..., help="Path to scanned PDF file"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    layout: Optional[str] = typer.Option(None, "--layout", "-l", help="Layout ID to use"),
    scale: float = typer.Option(DEFAULT_SCALE, "--scale", help="Page render scale"),
    lang: str = typer.Option(DEFAULT_LANG, "--lang", help="Tesseract language"),
    table: bool = typer.Option(False, "--table", help="Print rich tables instead of JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """OCR a scanned statement PDF and extract its summary."""
    _configure_logging(verbose)

    if not pdf_path.exists():
        console.print(f"[red]Error: PDF file not found: {pdf_path}[/red]")
        raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            progress.add_task("Processing your bank statement...", total=None)
            result: DocumentResult = parse_statement_sync(pdf_path, layout, scale=scale, lang=lang)
    except BankscanError as e:
        console.print(f"[red]Error parsing PDF: {escape(str(e))}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)

    _emit(result, output, table, result.summary)


@app.command()
def interpret(
    text_path: Path = typer.Argument(..., help="Path to recognized text file"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    layout: Optional[str] = typer.Option(None, "--layout", "-l", help="Layout ID to use"),
    table: bool = typer.Option(False, "--table", help="Print rich tables instead of JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Interpret text that was already recognized from a statement."""
    _configure_logging(verbose)
    text = _read_text_file(text_path)

    try:
        statement_layout = LayoutRegistry().get_layout(layout) if layout else default_layout()
    except BankscanError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    summary = StatementInterpreter(statement_layout).interpret(text)
    _emit(summary, output, table, summary)


@app.command()
def detect(
    text_path: Path = typer.Argument(..., help="Path to recognized text file")
):
    """Detect which layout matches recognized statement text."""
    layout_id = LayoutRegistry().detect_layout(_read_text_file(text_path))
    if layout_id:
        console.print(f"[green]Detected layout: {layout_id}[/green]")
    else:
        console.print("[red]No matching layout found[/red]")
        raise typer.Exit(1)


@app.command()
def layouts():
    """List available layouts."""
    registry = LayoutRegistry()
    for layout_id in registry.list_layouts():
        layout = registry.get_layout(layout_id)
        console.print(f"{escape(layout_id)}: {escape(layout.bank)}")


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a summary JSON file against the schema."""
    try:
        summary = StatementSummary.model_validate_json(json_path.read_text())
        console.print("[green]✓ JSON is valid[/green]")
        console.print(f"Name: {escape(summary.identity.name)}")
        console.print(f"Total Deposits: {summary.total_deposits:.2f}")
        console.print(f"Purchases: {len(summary.purchases)}")
    except Exception as e:
        console.print(f"[red]Validation failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
