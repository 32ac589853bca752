"""Click CLI for the section resolver.

Commands:
    outline: Print the numbered section outline of a document
    inspect: Resolve a document and print (or save) its structure as JSON
    toc: Print the table of contents as text or JSON
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from markup_sections.config import Config
from markup_sections.exceptions import MarkupSectionsError
from markup_sections.pipeline import Pipeline


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to a YAML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Resolve the section structure of lightweight-markup documents."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = Config.load(config_path)
    except MarkupSectionsError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    if verbose:
        config.verbose = True

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["pipeline"] = Pipeline(config)


@main.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.option("--numbered", is_flag=True, help="Number sections even if the document does not.")
@click.pass_context
def outline(ctx: click.Context, source: Path, numbered: bool) -> None:
    """Print every section of SOURCE, indented by level."""
    pipeline: Pipeline = ctx.obj["pipeline"]
    if numbered:
        pipeline.config.sections.numbered = True

    try:
        document = pipeline.parse_file(source)
    except MarkupSectionsError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if document.title:
        click.echo(document.title)
    for item in pipeline.last_report.sections:
        marker = "~ " if item.sectname == "floating_title" else ""
        click.echo(f"{'  ' * item.level}{marker}{item.label}")


@main.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the JSON to this file instead of stdout.",
)
@click.option("--report", is_flag=True, help="Print a structure report instead of the document.")
@click.pass_context
def inspect(ctx: click.Context, source: Path, output: Path | None, report: bool) -> None:
    """Resolve SOURCE and output its section tree as JSON (for debugging)."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        document = pipeline.parse_file(source)
    except MarkupSectionsError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if report:
        json_str = pipeline.last_report.to_json()
    else:
        json_str = document.to_json()

    if output is None:
        click.echo(json_str)
    else:
        output.write_text(json_str, encoding="utf-8")
        click.echo(f"Saved: {output}")

    for warning in document.warnings:
        click.echo(f"Warning: {warning}", err=True)


@main.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output the TOC tree as JSON.")
@click.pass_context
def toc(ctx: click.Context, source: Path, as_json: bool) -> None:
    """Print the table of contents of SOURCE."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        result = pipeline.toc(source)
    except MarkupSectionsError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
    else:
        click.echo(result.to_text())
