"""
pdf-preflight CLI
==================
Command-line interface for the pdf-preflight validator.

Commands:
    validate    Validate the object graph of a PDF
    version     Show version information

Usage::

    pdf-preflight validate document.pdf
    pdf-preflight validate document.pdf --relaxed --pdf-version 1.7
    pdf-preflight validate document.pdf --json-output
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import pikepdf
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

from .. import __version__
from ..models.config import ValidationConfig
from ..models.version import PDFVersion, ValidationMode
from ..validator.document import ValidationResult, validate_file

console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_version(ctx: click.Context, param: click.Parameter, value: str | None) -> PDFVersion | None:
    if value is None:
        return None
    try:
        return PDFVersion.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


@click.group()
@click.version_option(version=__version__, prog_name="pdf-preflight")
def cli() -> None:
    """
    pdf-preflight – PDF object graph validator.

    Checks the page tree and file specifications of a PDF against
    ISO 32000, honouring the version each feature was introduced in.
    """


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


def _result_to_json(result: ValidationResult) -> dict:
    return {
        "file": result.source,
        "passed": result.passed,
        "version": str(result.version),
        "mode": result.mode.value,
        "page_count": result.page_count,
        "pages": [
            {
                "index": p.index,
                "ref": str(p.ref),
                "media_box": list(p.attributes.media_box) if p.attributes.media_box else None,
                "crop_box": list(p.attributes.crop_box) if p.attributes.crop_box else None,
                "rotate": p.attributes.rotate,
                "resources": p.attributes.resources is not None,
            }
            for p in result.pages
        ],
        "error": None if result.error is None else {
            "kind": result.error.kind.value,
            "dict": result.error.dict_name,
            "entry": result.error.entry_name,
            "message": result.error.message,
        },
    }


def _print_result(pdf_path: Path, result: ValidationResult) -> None:
    console.print()
    status_str = "[bold green]PASS[/bold green]" if result.passed else "[bold red]FAIL[/bold red]"
    console.print(Panel(
        f"[bold]{escape(pdf_path.name)}[/bold]\n"
        f"Status: {status_str}  |  "
        f"Version: {result.version}  |  Mode: {result.mode.value}  |  "
        f"Pages: {result.page_count if result.page_count is not None else '—'}",
        title="pdf-preflight Validation",
        border_style="blue",
    ))

    if result.pages:
        t = Table(box=box.SIMPLE, title="Pages")
        t.add_column("#", style="dim")
        t.add_column("Object")
        t.add_column("MediaBox")
        t.add_column("CropBox")
        t.add_column("Rotate")

        for p in result.pages:
            attrs = p.attributes
            t.add_row(
                str(p.index + 1),
                str(p.ref),
                f"{attrs.media_box.width:g} x {attrs.media_box.height:g}" if attrs.media_box else "—",
                f"{attrs.crop_box.width:g} x {attrs.crop_box.height:g}" if attrs.crop_box else "—",
                str(attrs.rotate) if attrs.rotate is not None else "—",
            )
        console.print(t)

    if result.error is not None:
        console.print(f"\n[red]{result.error.kind.value}[/red] {escape(result.error.message)}")

    console.print()


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, path_type=Path))
@click.option("--relaxed", is_flag=True, help="Tolerate common producer quirks")
@click.option("--pdf-version", callback=_parse_version, default=None,
              help="Validate as this version (e.g. 1.7) instead of the declared one")
@click.option("--no-page-count-check", is_flag=True, help="Do not compare /Count with the pages found")
@click.option("--json-output", is_flag=True, help="Output results as JSON")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default="WARNING",
              show_default=True)
def validate(
    pdf_path: Path,
    relaxed: bool,
    pdf_version: PDFVersion | None,
    no_page_count_check: bool,
    json_output: bool,
    log_level: str,
) -> None:
    """Validate the object graph of a PDF file."""
    _setup_logging(log_level.upper())

    config = ValidationConfig(
        mode=ValidationMode.RELAXED if relaxed else ValidationMode.STRICT,
        version=pdf_version,
        check_page_count=not no_page_count_check,
    )

    try:
        result = validate_file(pdf_path, config)
    except (pikepdf.PdfError, OSError, ValueError) as e:
        console.print(f"[red]Cannot open {escape(str(pdf_path))}: {escape(str(e))}[/red]")
        sys.exit(2)

    if json_output:
        click.echo(json.dumps(_result_to_json(result), indent=2))
    else:
        _print_result(pdf_path, result)

    sys.exit(0 if result.passed else 1)


# ---------------------------------------------------------------------------
# version info
# ---------------------------------------------------------------------------


@cli.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(Panel(
        f"[bold cyan]pdf-preflight[/bold cyan] v{__version__}\n\n"
        "PDF object graph validator\n"
        "Covers: page tree, inheritable page attributes, file specifications,\n"
        "        embedded file streams, embedded files name tree\n"
        "Versions: PDF 1.0 – 1.7, PDF 2.0\n"
        f"pikepdf:  {pikepdf.__version__}",
        title="pdf-preflight",
        border_style="cyan",
    ))
