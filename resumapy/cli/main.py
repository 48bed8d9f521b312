"""resumapy CLI - upload and resume commands."""
import asyncio
import json
from pathlib import Path
from typing import Optional, List, Dict

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

app = typer.Typer(
    name="resumapy",
    help="Resumable upload client",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def parse_params(values: Optional[List[str]]) -> Dict[str, str]:
    """Turn repeated ``key=value`` options into a dict."""
    params = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {item!r}")
        params[key] = value
    return params


def parse_metadata(raw: Optional[str], file_path: Path) -> dict:
    if not raw:
        return {"name": file_path.name}
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Metadata is not valid JSON: {e}")
    if not isinstance(metadata, dict):
        raise typer.BadParameter("Metadata must be a JSON object")
    return metadata


def _run_upload(
    file_path: Path,
    session_location: Optional[str],
    access_token: str,
    refresh_token: Optional[str],
    client_id: Optional[str],
    client_secret: Optional[str],
    host: str,
    api_path: str,
    chunk_size: int,
    retries: int,
    metadata: dict,
    params: Dict[str, str],
    verbose: bool,
):
    from resumapy import ResumableUploadClient, APIConfig, RetryConfig, Credentials
    from resumapy.core.upload.models import UploadProgress

    config = APIConfig(host=host, api_path=api_path, retry=RetryConfig(budget=retries))
    credentials = Credentials(
        access_token=access_token,
        refresh_token=refresh_token,
        client_id=client_id,
        client_secret=client_secret
    )

    async def do_upload():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task(f"Uploading {file_path.name}", total=100)

            def on_progress(p: UploadProgress):
                progress.update(task, completed=p.percentage)

            async with ResumableUploadClient(config, progress_callback=on_progress) as client:
                if verbose:
                    client.on("progress", lambda message: console.log(message))
                client.on("error", lambda error: console.print(f"[red]{error}[/red]"))

                if session_location:
                    return await client.resume(
                        file_path, credentials, session_location, chunk_size=chunk_size
                    )
                return await client.upload(
                    file_path,
                    credentials,
                    metadata,
                    chunk_size=chunk_size,
                    query_params=params
                )

    outcome = run_async(do_upload())

    if not outcome.success:
        console.print(f"[red]Upload failed at byte {outcome.bytes_acknowledged:,}[/red]")
        if outcome.session_location:
            console.print(f"Resume with: resumapy resume {file_path} '{outcome.session_location}'")
        raise typer.Exit(1)

    console.print(f"[green]Uploaded:[/green] {file_path.name}")
    console.print_json(data=outcome.resource)


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    access_token: str = typer.Option(..., "--access-token", envvar="RESUMAPY_ACCESS_TOKEN", help="OAuth access token"),
    refresh_token: str = typer.Option(None, "--refresh-token", envvar="RESUMAPY_REFRESH_TOKEN", help="OAuth refresh token"),
    client_id: str = typer.Option(None, "--client-id", envvar="RESUMAPY_CLIENT_ID", help="OAuth client id"),
    client_secret: str = typer.Option(None, "--client-secret", envvar="RESUMAPY_CLIENT_SECRET", help="OAuth client secret"),
    host: str = typer.Option("www.googleapis.com", "--host", help="Target API host"),
    api_path: str = typer.Option("/upload/drive/v3/files", "--api-path", help="Upload endpoint path"),
    chunk_size: int = typer.Option(8 * 1024 * 1024, "--chunk-size", "-c", min=1, help="Chunk size in bytes"),
    retries: int = typer.Option(0, "--retries", "-r", help="Retry budget (negative = unlimited)"),
    metadata: str = typer.Option(None, "--metadata", "-m", help="Metadata JSON document"),
    param: List[str] = typer.Option(None, "--param", "-p", help="Extra query parameter key=value"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print progress messages"),
):
    """Upload a file through a new resumable session."""
    _run_upload(
        file_path, None, access_token, refresh_token, client_id, client_secret,
        host, api_path, chunk_size, retries,
        parse_metadata(metadata, file_path), parse_params(param), verbose
    )


@app.command()
def resume(
    file_path: Path = typer.Argument(..., help="Local file being uploaded", exists=True, dir_okay=False),
    session_location: str = typer.Argument(..., help="Session location URL"),
    access_token: str = typer.Option(..., "--access-token", envvar="RESUMAPY_ACCESS_TOKEN", help="OAuth access token"),
    refresh_token: str = typer.Option(None, "--refresh-token", envvar="RESUMAPY_REFRESH_TOKEN", help="OAuth refresh token"),
    client_id: str = typer.Option(None, "--client-id", envvar="RESUMAPY_CLIENT_ID", help="OAuth client id"),
    client_secret: str = typer.Option(None, "--client-secret", envvar="RESUMAPY_CLIENT_SECRET", help="OAuth client secret"),
    host: str = typer.Option("www.googleapis.com", "--host", help="Target API host"),
    api_path: str = typer.Option("/upload/drive/v3/files", "--api-path", help="Upload endpoint path"),
    chunk_size: int = typer.Option(8 * 1024 * 1024, "--chunk-size", "-c", min=1, help="Chunk size in bytes"),
    retries: int = typer.Option(0, "--retries", "-r", help="Retry budget (negative = unlimited)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print progress messages"),
):
    """Continue an interrupted upload."""
    _run_upload(
        file_path, session_location, access_token, refresh_token, client_id, client_secret,
        host, api_path, chunk_size, retries,
        {}, {}, verbose
    )


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
