from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
import uvicorn
from rich.console import Console

from . import __version__
from .api import build_app
from .compare import compare
from .config import config_path, default_config, load_config, save_config
from .errors import ErrorCodes, InsufficientDocuments, SourceUnavailable
from .normalize import normalize
from .output import CleanedOutput
from .pipeline import fingerprint_document, run
from .simhash import format_fingerprint, get_hash, parse_fingerprint
from .sources import read_document
from .util import setup_logging


console = Console(stderr=True)
app = typer.Typer(add_completion=False, no_args_is_help=True, context_settings={"help_option_names": ["-h", "--help"]})


def _cfg_from_ctx(ctx: typer.Context) -> dict:
    obj = getattr(ctx, "obj", None)
    if isinstance(obj, dict) and "config" in obj:
        return obj["config"]
    return load_config()


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(None, "--version", "-V", help="Show version and exit", is_eager=True),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log progress (INFO)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
):
    if version:
        typer.echo(__version__)
        raise typer.Exit()
    cfg = load_config()
    level = "INFO" if verbose else (log_level or cfg.get("logging", {}).get("level", "WARNING"))
    setup_logging(level, console=console)
    if ctx.obj is None:
        ctx.obj = {}
    if isinstance(ctx.obj, dict):
        ctx.obj["config"] = cfg


@app.command("version")
def _version_cmd():
    """Print version and exit."""
    typer.echo(__version__)


@app.command("compare")
def compare_cmd(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., help="Two or more documents to compare pairwise"),
    save_cleaned: Optional[bool] = typer.Option(None, "--save-cleaned/--no-save-cleaned", help="Write normalized text to a timestamped directory"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Root for cleaned output (default from config)"),
    as_json: bool = typer.Option(False, "--json", help="Machine-readable output"),
    hashes: bool = typer.Option(True, "--hashes/--no-hashes", help="Print each document's simhash"),
    workers: int = typer.Option(1, "--workers", min=1, help="Fingerprint documents in parallel worker processes"),
):
    """Fingerprint documents and report distance, similarity and relationship per pair."""
    cfg = _cfg_from_ctx(ctx)
    out_cfg = cfg.get("output", {})
    if save_cleaned is None:
        save_cleaned = bool(out_cfg.get("save_cleaned", False))
    sink = None
    if save_cleaned:
        sink = CleanedOutput(output_dir or out_cfg.get("root", "output"))
        try:
            sink.prepare()
        except OSError as e:
            console.print(f"[red]{ErrorCodes.ERR_OUTPUT_WRITE}[/red]: cannot create output directory: {e}", highlight=False)
            sink = None

    try:
        report = run(paths, sink=sink, hash_name=cfg.get("fingerprint", {}).get("hash", "fnv1a"), workers=workers)
    except InsufficientDocuments as e:
        for label, reason in e.failures:
            console.print(f"[yellow]{ErrorCodes.ERR_SOURCE_UNAVAILABLE}[/yellow]: {label}: {reason}", highlight=False)
        if as_json:
            typer.echo(json.dumps({"ok": False, "error": e.code, "detail": str(e)}))
        else:
            console.print(f"[red]{e.code}[/red]: Could not process enough files ({e})", highlight=False)
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[red]Invalid configuration[/red]: {e}", highlight=False)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps({"ok": True, **report.to_dict()}, ensure_ascii=False, indent=2))
        return

    for label, reason in report.failures:
        console.print(f"[yellow]{ErrorCodes.ERR_SOURCE_UNAVAILABLE}[/yellow]: {label}: {reason}", highlight=False)
    if report.output_dir:
        console.print(f"Cleaned files written to {report.output_dir}")
    if hashes:
        for i, d in enumerate(report.documents, start=1):
            typer.echo(f"Simhash of file {i}: {d.hex}")
    for p in report.pairs:
        r = p.result
        typer.echo(f"Distance between file {p.left + 1} and file {p.right + 1}: {r.distance}")
        typer.echo(f"Similarity percentage: {r.similarity_percent:.2f}%")
        typer.echo(f"Relationship: {r.relationship}")


@app.command("fingerprint")
def fingerprint_cmd(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., help="Documents to fingerprint"),
):
    """Print `<hex simhash>  <path>` per readable document."""
    hash_name = _cfg_from_ctx(ctx).get("fingerprint", {}).get("hash", "fnv1a")
    try:
        get_hash(hash_name)
    except ValueError as e:
        console.print(f"[red]Invalid configuration[/red]: {e}", highlight=False)
        raise typer.Exit(code=2)
    failed = False
    for p in paths:
        try:
            doc = read_document(p)
        except SourceUnavailable as e:
            console.print(f"[yellow]{e.code}[/yellow]: {e}", highlight=False)
            failed = True
            continue
        fd = fingerprint_document(doc, hash_name)
        typer.echo(f"{fd.hex}  {fd.label}")
    if failed:
        raise typer.Exit(code=1)


@app.command("distance")
def distance_cmd(
    a: str = typer.Argument(..., help="First fingerprint (hex)"),
    b: str = typer.Argument(..., help="Second fingerprint (hex)"),
):
    """Compare two previously printed fingerprints."""
    try:
        fa, fb = parse_fingerprint(a), parse_fingerprint(b)
    except ValueError as e:
        console.print(f"[red]{ErrorCodes.ERR_BAD_FINGERPRINT}[/red]: {e}", highlight=False)
        raise typer.Exit(code=2)
    r = compare(fa, fb)
    typer.echo(json.dumps({"a": format_fingerprint(fa), "b": format_fingerprint(fb), **r.to_dict()}))


@app.command("normalize")
def normalize_cmd(path: Path = typer.Argument(..., help="Document to clean")):
    """Print a document with head/script/style/ad-banner/header/footer removed."""
    try:
        doc = read_document(path)
    except SourceUnavailable as e:
        console.print(f"[red]{e.code}[/red]: {e}", highlight=False)
        raise typer.Exit(code=1)
    typer.echo(normalize(doc.content).decode("utf-8", errors="replace"), nl=False)


@app.command()
def config(action: str = typer.Argument("print", help="print|reset|path")):
    """Show or reset $PAGESIM_HOME/config.yaml."""
    if action == "print":
        typer.echo(json.dumps(load_config(), indent=2))
        return
    if action == "reset":
        save_config(default_config())
        typer.echo(str(config_path()))
        return
    if action == "path":
        typer.echo(str(config_path()))
        return
    console.print("Unknown action. Use print|reset|path")
    raise typer.Exit(code=2)


@app.command()
def serve(ctx: typer.Context, host: Optional[str] = None, port: Optional[int] = None, reload: bool = False):
    """Start the HTTP API."""
    srv = _cfg_from_ctx(ctx).get("server", {})
    uvicorn.run(
        build_app(),
        host=host or srv.get("host", "127.0.0.1"),
        port=int(port or srv.get("port", 8788)),
        reload=reload,
        log_level="info",
    )
