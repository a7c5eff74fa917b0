"""CLI interface."""
from __future__ import annotations

import json
import logging
from typing import Optional

import typer

from animgraph.animation_resolver import DirectoryAnimationResolver, export_catalog
from animgraph.ir.codec import GraphDecodeError, decode, encode
from animgraph.remap import apply_replacements, collect_clip_names, plan_replacements
from animgraph.runtime.memory import InMemoryRuntimeGraph
from animgraph.services.conversion_service import generate as generate_graph
from animgraph.tools.file_storage import FileAssetStore
from animgraph.tools.graph_validator import validate as validate_text
from animgraph.utils.config import settings
from animgraph.utils.file_utils import read_text_file

app = typer.Typer(add_completion=False)


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level.")):
    """Convert and validate animation state graph documents."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read(file: str) -> str:
    try:
        return read_text_file(file)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _emit(text: str, out: Optional[str]) -> None:
    if out:
        path = FileAssetStore().write_text(out, text)
        typer.echo(f"Wrote {path}")
    else:
        typer.echo(text)


@app.command()
def validate(file: str = typer.Argument(..., help="Graph document to check.")):
    """Report every structural defect in a document."""
    ok, diagnostics = validate_text(_read(file))
    if ok:
        typer.echo("Document is valid.")
        return
    for diagnostic in diagnostics:
        typer.echo(diagnostic, err=True)
    raise typer.Exit(code=1)


@app.command()
def convert(
    file: str = typer.Argument(..., help="Graph document to normalize."),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output location (relative to the output dir)."),
):
    """Decode and re-encode a document in canonical form."""
    try:
        graph = decode(_read(file))
    except GraphDecodeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _emit(encode(graph), out)


@app.command()
def generate(
    file: str = typer.Argument(..., help="Graph document to materialize."),
    folder: Optional[str] = typer.Option(None, "--folder", help="Animation folder used to resolve clips."),
):
    """Dry-run materialization into an in-memory graph and print the report."""
    scope = folder or settings.animation_folder
    runtime = InMemoryRuntimeGraph()
    try:
        result, report = generate_graph(_read(file), runtime, resolver=DirectoryAnimationResolver(), search_scope=scope)
    except GraphDecodeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    payload = {
        "diagnostics": result.diagnostics,
        "report": report.to_dict(),
        "graph": runtime.summary(),
    }
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def catalog(
    folder: str = typer.Argument(..., help="Folder to scan for clips."),
    out: Optional[str] = typer.Option(None, "--out", "-o"),
):
    """List the animation clips available in a folder."""
    names = DirectoryAnimationResolver().scan(folder)
    _emit(export_catalog(names), out)


@app.command()
def remap(
    file: str = typer.Argument(..., help="Graph document whose clips are replaced."),
    folder: str = typer.Option(..., "--folder", help="Folder holding the replacement clips."),
    auto_match: bool = typer.Option(False, "--auto-match", help="Match replacements by similar names."),
    safety_check: bool = typer.Option(False, "--safety-check", help="Leave clips mapped to themselves untouched."),
    source_filter: str = typer.Option("", "--source-filter"),
    destination_filter: str = typer.Option("", "--destination-filter"),
    out: Optional[str] = typer.Option(None, "--out", "-o"),
):
    """Replace the clips used by a document with clips from another folder."""
    resolver = DirectoryAnimationResolver()
    try:
        graph = decode(_read(file))
    except GraphDecodeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    plan = plan_replacements(
        collect_clip_names(graph),
        resolver.scan(folder),
        auto_match=auto_match,
        source_filter=source_filter,
        destination_filter=destination_filter,
    )
    replaced = apply_replacements(graph, plan, resolver, search_scope=folder, safety_check=safety_check)
    typer.echo(f"Replaced {replaced} animation(s).", err=True)
    _emit(encode(graph), out)


if __name__ == "__main__":
    app()
