"""Command line interface for drivesearch."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from drivesearch.config import AppConfig
from drivesearch.errors import SnapshotError, SyncError
from drivesearch.index.search import Matcher
from drivesearch.index.storage import load_snapshot
from drivesearch.models import MatchResult
from drivesearch.sync.client import DriveSearchBinary
from drivesearch.web.app import app as web_app


console = Console()
app = typer.Typer(help="drivesearch - fuzzy search over your synced Google Drive files")

_KIND_BY_EXTENSION = {
    "pdf": "PDF",
    "doc": "Text",
    "docx": "Text",
    "txt": "Text",
    "xls": "Spreadsheet",
    "xlsx": "Spreadsheet",
    "ppt": "Slides",
    "pptx": "Slides",
    "png": "Image",
    "jpg": "Image",
    "jpeg": "Image",
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _kind_for(result: MatchResult) -> str:
    """Short label for the file type, used for the table's Type column."""
    _, dot, ext = result.title.rpartition(".")
    if dot:
        kind = _KIND_BY_EXTENSION.get(ext.lower())
        if kind:
            return kind
    if result.mime_type and result.mime_type.startswith("application/vnd.google-apps."):
        return result.mime_type.rsplit(".", 1)[-1].capitalize()
    return "Document"


def _print_items(results: List[MatchResult]) -> None:
    typer.echo(json.dumps({"items": [r.to_item() for r in results]}, ensure_ascii=False))


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    storage: Path = typer.Option(None, "--storage", help="Snapshot JSON path"),
    limit: int = typer.Option(AppConfig().max_results, help="Number of results to display"),
    as_json: bool = typer.Option(False, "--json", help="Print launcher JSON items"),
    delegate: bool = typer.Option(
        False, "--delegate", help="Let the fuzzy-drive-search binary do the matching"
    ),
    binary: Path = typer.Option(None, "--binary", help="fuzzy-drive-search binary path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search the synced file index."""
    _setup_logging(verbose)
    config = AppConfig(storage_path=storage, binary_path=binary)

    if delegate:
        try:
            results = DriveSearchBinary.from_config(config).search(query)[: max(0, limit)]
        except SyncError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1)
    else:
        matcher = Matcher.from_config(config)
        results = matcher.search(query, limit=limit)
        if not matcher.cache.is_loaded and query.strip() and not as_json:
            console.print(
                f"[yellow]No snapshot loaded from {matcher.cache.storage_path}; "
                "run 'drivesearch sync' first.[/yellow]"
            )

    if as_json:
        _print_items(results)
        return

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Folder")
    table.add_column("Type")
    table.add_column("Link")

    for result in results:
        table.add_row(result.title, result.subtitle, _kind_for(result), result.arg)

    console.print(table)


@app.command()
def sync(
    binary: Path = typer.Option(None, "--binary", help="fuzzy-drive-search binary path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Refresh the snapshot from Google Drive."""
    _setup_logging(verbose)
    client = DriveSearchBinary.from_config(AppConfig(binary_path=binary))

    console.print("Syncing Google Drive file list...")
    try:
        client.sync()
    except SyncError as exc:
        console.print(f"[red]Sync failed: {exc.detail}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Sync complete.[/green]")


@app.command()
def init(
    binary: Path = typer.Option(None, "--binary", help="fuzzy-drive-search binary path"),
    client_id: Optional[str] = typer.Option(None, "--client-id", help="OAuth client id"),
    client_secret: Optional[str] = typer.Option(
        None, "--client-secret", help="OAuth client secret"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Authenticate with Google Drive and run the first sync."""
    _setup_logging(verbose)
    client = DriveSearchBinary.from_config(AppConfig(binary_path=binary))

    console.print("Starting Google Drive authentication...")
    try:
        client.init(client_id=client_id, client_secret=client_secret)
    except SyncError as exc:
        console.print(f"[red]Initialization failed: {exc.detail}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Initialization complete.[/green]")


@app.command()
def status(
    storage: Path = typer.Option(None, "--storage", help="Snapshot JSON path"),
) -> None:
    """Show what the local snapshot contains."""
    resolved = AppConfig(storage_path=storage).resolve_storage_path()

    try:
        snapshot = load_snapshot(resolved)
    except SnapshotError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    if snapshot is None:
        console.print(f"[yellow]Snapshot not found at {resolved}, nothing synced yet.[/yellow]")
        return

    console.print(f"Snapshot: [bold]{resolved}[/bold]")
    console.print(f"Files: {len(snapshot.files)}, folders: {len(snapshot.folders)}")
    console.print(f"Last sync: {snapshot.last_sync}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    storage: Path = typer.Option(None, "--storage", help="Snapshot JSON path"),
) -> None:
    """Start the HTTP search API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    if storage is not None:
        web_app.state.config = AppConfig(storage_path=storage)
    resolved = web_app.state.config.resolve_storage_path()
    if not resolved.exists():
        console.print("[yellow]Warning: snapshot not found, searches will be empty.[/yellow]")

    console.print(f"Starting web interface on http://{host}:{port} (snapshot: {resolved})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    app()
