"""
Blob Gateway CLI Tool

Command-line interface for running the gateway and talking to it.

Usage:
    blob-gateway serve            - Start the server
    blob-gateway upload FILE      - Upload a file
    blob-gateway list             - List stored files
    blob-gateway delete TARGET    - Delete a file by pathname or URL
"""
import os
import sys
from pathlib import Path

import click
import httpx
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from blob_gateway import __version__

# Load environment variables
load_dotenv()

console = Console()


def _api_base() -> str:
    port = os.getenv("PORT", "3000")
    return os.getenv("API_BASE_URL", f"http://localhost:{port}").rstrip("/")


def _fail(response: httpx.Response) -> None:
    """Print an API error and exit."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("message") or data.get("error") or response.text
        error = data.get("error") if data.get("message") else None
    else:
        message, error = response.text, None
    console.print(f"[red]✗ {response.status_code}: {message}[/red]")
    if error:
        console.print(f"  {error}")
    sys.exit(1)


def _request(method: str, path: str, **kwargs) -> httpx.Response:
    try:
        return httpx.request(method, f"{_api_base()}{path}", timeout=60.0, **kwargs)
    except (httpx.ConnectError, httpx.TimeoutException):
        console.print(f"[red]✗ Gateway not reachable at {_api_base()}[/red]")
        console.print("\nStart it with:")
        console.print("[yellow]blob-gateway serve[/yellow]")
        sys.exit(1)


def _format_size(size: int | None) -> str:
    if size is None:
        return "-"
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size} B"


@click.group()
@click.version_option(version=__version__, prog_name="Blob Gateway")
def main():
    """
    Blob Gateway - upload, list and delete files on Vercel Blob.
    """
    pass


@main.command()
@click.option("--port", type=int, default=None, help="Port (defaults to PORT or 3000)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(port: int | None, reload: bool):
    """
    Start the gateway server.
    """
    import uvicorn

    from blob_gateway.config import get_settings

    settings = get_settings()
    port = port or settings.PORT
    if not settings.has_token:
        console.print("[yellow]⚠ BLOB_READ_WRITE_TOKEN not configured[/yellow]")
    console.print(f"[green]Servidor rodando em http://localhost:{port}[/green]")
    uvicorn.run("blob_gateway.main:app", host=settings.HOST, port=port, reload=reload)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=None, help="Pathname to store under (defaults to file name)")
def upload(file: Path, name: str | None):
    """
    Upload a file.

    Example:
        blob-gateway upload ./photo.png --name images/photo.png
    """
    with file.open("rb") as f:
        response = _request(
            "POST",
            "/api/upload",
            content=f,
            headers={"x-vercel-filename": name or file.name},
        )
    if response.status_code != 200:
        _fail(response)

    blob = response.json()
    console.print(f"[green]✓ Uploaded[/green] {blob.get('pathname')}")
    console.print(f"  {blob.get('url')}")


@main.command(name="list")
def list_files():
    """
    List stored files.
    """
    response = _request("GET", "/api/files")
    if response.status_code != 200:
        _fail(response)

    blobs = response.json()
    if not blobs:
        console.print("[yellow]No files stored[/yellow]")
        return

    table = Table(title=f"Files ({len(blobs)})")
    table.add_column("Pathname", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Uploaded", style="dim")
    table.add_column("URL")
    for blob in blobs:
        table.add_row(
            blob.get("pathname", ""),
            _format_size(blob.get("size")),
            blob.get("uploadedAt") or "-",
            blob.get("url", ""),
        )
    console.print(table)


@main.command()
@click.argument("target")
def delete(target: str):
    """
    Delete a file by pathname or URL.

    Example:
        blob-gateway delete images/photo.png
    """
    param = "url" if target.startswith(("http://", "https://")) else "pathname"
    response = _request("DELETE", "/api/delete", params={param: target})
    if response.status_code != 200:
        _fail(response)
    console.print(f"[green]✓ {response.json().get('message')}[/green] {target}")


if __name__ == "__main__":
    main()
