"""
Command-line interface for the text-correction toolkit.

Commands:
    correct  - send text or a document to iFlytek and show the corrections
    process  - reconcile a saved vendor response with its original text
    compare  - line/character diff of two text files
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .categories import display_name
from .config import CorrectionConfig, ServiceConfig
from .content_sources import ContentExtractionError, extract_text_from_file
from .diff_engine import compare_texts
from .highlighter import format_error_for_display
from .models import ComparisonResult, DiffLineType
from .pipeline import CorrectionResult, process_result
from .text_preprocess import preprocess_text, sanitize_input
from .xunfei_client import XunfeiClientError, create_xunfei_client

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _read_text_argument(
    text: Optional[str],
    text_file: Optional[Path],
    file_option: str = "--file",
) -> str:
    if text and text_file:
        console.print(f"[red]Error:[/red] Provide only one of --text or {file_option}")
        sys.exit(1)
    if text_file:
        return extract_text_from_file(text_file)
    if text:
        return text
    console.print(f"[red]Error:[/red] Must provide either --text or {file_option}")
    sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="zh-correct")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def main(verbose: bool) -> None:
    """
    Chinese text correction with the iFlytek correction API.

    Examples:

        zh-correct correct --text "他足不初户地在家学习。"

        zh-correct process response.json --text-file original.txt

        zh-correct compare before.txt after.txt
    """
    _configure_logging(verbose)


@main.command()
@click.option("--text", "-t", type=str, help="Text to correct.")
@click.option(
    "--file",
    "-f",
    "text_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Document to correct (.txt, .docx or .pdf).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the full result as JSON to this path.",
)
@click.option(
    "--html",
    "show_html",
    is_flag=True,
    default=False,
    help="Include highlighted HTML in the JSON output.",
)
def correct(
    text: Optional[str],
    text_file: Optional[Path],
    output: Optional[Path],
    show_html: bool,
) -> None:
    """Send text to the correction service and show the result."""
    service_config = ServiceConfig.from_env()

    try:
        raw_text = _read_text_argument(text, text_file)
        prepared = preprocess_text(sanitize_input(raw_text), service_config.max_text_length)
        for warning in prepared.warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        if not prepared.text:
            console.print("[red]Error:[/red] Nothing to correct")
            sys.exit(1)

        with console.status("[bold green]Calling correction service..."):
            client = create_xunfei_client(service_config)
            with client:
                response = client.correct_text(prepared.text)

        result = process_result(response, prepared.text)
        _display_result(result)
        if output:
            _write_json(output, result.to_dict(include_html=show_html))

    except ContentExtractionError as e:
        console.print(f"[red]Content extraction error:[/red] {e}")
        sys.exit(1)
    except XunfeiClientError as e:
        console.print(f"[red]Correction service error:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument(
    "response_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--text", "-t", type=str, help="Original text the response refers to.")
@click.option(
    "--text-file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File holding the original text.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the full result as JSON to this path.",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Use strict validation limits.",
)
def process(
    response_file: Path,
    text: Optional[str],
    text_file: Optional[Path],
    output: Optional[Path],
    strict: bool,
) -> None:
    """Reconcile a saved vendor response (JSON) with its original text."""
    try:
        original = _read_text_argument(text, text_file, "--text-file")
        vendor_result = json.loads(response_file.read_text(encoding="utf-8"))
    except ContentExtractionError as e:
        console.print(f"[red]Content extraction error:[/red] {e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid response file:[/red] {e}")
        sys.exit(1)

    config = CorrectionConfig.strict() if strict else CorrectionConfig()
    result = process_result(vendor_result, original, config)
    _display_result(result)
    if output:
        _write_json(output, result.to_dict(include_html=True))


@main.command()
@click.argument("left", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("right", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--case-sensitive",
    is_flag=True,
    default=False,
    help="Treat upper and lower case as different.",
)
@click.option(
    "--ignore-whitespace",
    is_flag=True,
    default=False,
    help="Collapse whitespace runs before comparing.",
)
@click.option(
    "--strategy",
    type=click.Choice(["lookahead", "lcs"]),
    default="lookahead",
    show_default=True,
    help="Line alignment strategy.",
)
def compare(
    left: Path,
    right: Path,
    case_sensitive: bool,
    ignore_whitespace: bool,
    strategy: str,
) -> None:
    """Show a line diff of two text files."""
    try:
        left_text = extract_text_from_file(left)
        right_text = extract_text_from_file(right)
    except ContentExtractionError as e:
        console.print(f"[red]Content extraction error:[/red] {e}")
        sys.exit(1)

    comparison = compare_texts(
        left_text,
        right_text,
        ignore_case=not case_sensitive,
        ignore_whitespace=ignore_whitespace,
        config=CorrectionConfig(line_alignment=strategy),
    )
    _display_comparison(comparison)


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"\n[dim]Result saved to: {path}[/dim]")


def _display_result(result: CorrectionResult) -> None:
    """Display corrected text, error table and statistics."""
    console.print(Panel(
        escape(result.corrected_text),
        title="[bold green]Corrected text[/bold green]",
        border_style="green",
    ))

    if not result.real_errors:
        console.print(f"[green]{escape(result.errors[0].description)}[/green]")
    else:
        table = Table(title="Corrections", show_header=True)
        table.add_column("Pos", justify="right", style="dim")
        table.add_column("Type", style="cyan")
        table.add_column("Correction", style="yellow")
        table.add_column("Severity")
        for error in result.real_errors:
            table.add_row(
                str(error.position),
                escape(display_name(error.category)),
                escape(format_error_for_display(error)),
                error.severity.value,
            )
        console.print(table)

    stats = result.statistics
    console.print(
        f"\n[bold]Errors:[/bold] {stats.total_errors}  "
        f"[bold]Correction rate:[/bold] {stats.correction_rate}  "
        f"[bold]Similarity:[/bold] {stats.text_similarity}"
    )
    if result.anomalies:
        console.print("[yellow]Skipped items:[/yellow]")
        for kind, count in sorted(result.anomaly_counts.items()):
            console.print(f"  {kind}: {count}")


_ROW_STYLES = {
    DiffLineType.UNCHANGED: ("", ""),
    DiffLineType.MODIFIED: ("yellow", "yellow"),
    DiffLineType.REMOVED: ("red", "dim"),
    DiffLineType.ADDED: ("dim", "green"),
}


def _display_comparison(comparison: ComparisonResult) -> None:
    """Display diff rows side by side with per-type counts."""
    if comparison.is_empty:
        console.print("[dim]Both texts are empty.[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("", width=1)
    table.add_column("Left")
    table.add_column("Right")
    markers = {
        DiffLineType.UNCHANGED: " ",
        DiffLineType.MODIFIED: "~",
        DiffLineType.REMOVED: "-",
        DiffLineType.ADDED: "+",
    }
    for line in comparison.lines:
        left_style, right_style = _ROW_STYLES[line.type]
        left = escape(line.left) if line.left is not None else "（新增）"
        right = escape(line.right) if line.right is not None else "（已删除）"
        if left_style:
            left = f"[{left_style}]{left}[/{left_style}]"
        if right_style:
            right = f"[{right_style}]{right}[/{right_style}]"
        table.add_row(markers[line.type], left, right)
    console.print(table)

    stats = comparison.stats
    console.print(
        f"\n[green]+{stats['added']}[/green]  [red]-{stats['removed']}[/red]  "
        f"[yellow]~{stats['modified']}[/yellow]  unchanged {stats['unchanged']}"
    )


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
