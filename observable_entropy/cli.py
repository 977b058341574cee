"""Command-line interface for Observable Entropy.

Commands:
    pubkey   Print the configured publisher public key
    verify   Verify a local entropy.json offline
    fetch    Fetch a record from the origin (optionally verified)
    serve    Run the HTTP API
"""

import asyncio
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from observable_entropy import __version__
from observable_entropy.application.services.entropy_verifier import EntropyVerifier
from observable_entropy.application.validation.schemas import (
    EntropyRecord,
    SignedEntropyRecord,
)
from observable_entropy.application.validation.validator import validate
from observable_entropy.bootstrap.entropy import (
    close_entropy_dependencies,
    get_entropy_config,
    get_entropy_resolution_service,
)
from observable_entropy.bootstrap.logging import configure_structlog
from observable_entropy.domain.models.selector import (
    ByCommitId,
    ByHash,
    EntropySelector,
    Latest,
)


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="observable-entropy",
    help="Fetch and independently verify Observable Entropy records",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"observable-entropy version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log progress to stderr.",
    ),
) -> None:
    """Observable Entropy toolkit.

    Verify published entropy without trusting the service that serves it.
    """
    configure_structlog(
        "development",
        level=logging.DEBUG if verbose else logging.WARNING,
        log_file=sys.stderr,
        cache_loggers=False,
    )


@app.command()
def pubkey() -> None:
    """Print the Ed25519 public key records are verified against."""
    console.print(get_entropy_config().public_key_hex)


def _load_json(file: Path) -> Any:
    try:
        return json.loads(file.read_text(encoding="utf-8"))
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] File not found: {file}", style="bold")
        raise typer.Exit(code=1)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        console.print(f"[red]Error:[/red] Invalid JSON in {file}: {e}", style="bold")
        raise typer.Exit(code=1)


def _output_verification(
    verified: bool, claimed_hash: str | None, reason: str | None, output_format: str
) -> None:
    if output_format == "json":
        output = {"verified": verified, "hash": claimed_hash, "error": reason}
        console.print_json(json.dumps(output))
    elif verified:
        console.print(f"[green]VERIFIED[/green] - {claimed_hash}")
    else:
        console.print(f"[red]NOT VERIFIED[/red] - {reason}")
    if not verified:
        raise typer.Exit(code=1)


@app.command()
def verify(
    file: Path = typer.Argument(..., help="Path to an entropy.json file"),
    claimed_hash: Optional[str] = typer.Option(
        None,
        "--hash",
        "-H",
        help="Hash the record must have (default: the record's own hash)",
    ),
    public_key: Optional[str] = typer.Option(
        None,
        "--public-key",
        "-k",
        help="Ed25519 public key, hex (default: configured key)",
    ),
    max_iterations: Optional[int] = typer.Option(
        None,
        "--max-iterations",
        help="Refuse records demanding more digest rounds than this",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Verify a local entropy record offline.

    Checks the Ed25519 signature over the record hash, then recomputes the
    iterated digest of the concatenated file hashes.

    Example:
        observable-entropy verify entropy.json
        observable-entropy verify entropy.json --hash 2f8c... --format json
    """
    config = get_entropy_config()
    payload = _load_json(file)

    signed = validate(payload, SignedEntropyRecord)
    if not signed.is_ok:
        _output_verification(False, claimed_hash, signed.error.message, output_format.value)
        return

    record = signed.unwrap()
    expected = claimed_hash or record.hash
    try:
        verifier = EntropyVerifier(
            public_key or config.public_key_hex,
            max_iterations=(
                config.max_hash_iterations if max_iterations is None else max_iterations
            ),
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid public key: {e}", style="bold")
        raise typer.Exit(code=1)

    if output_format == OutputFormat.text:
        console.print(
            f"Verifying {len(record.files)} files over {record.hash_iterations} rounds...",
            style="dim",
        )
    verified = verifier.verify_sync(expected, record)
    _output_verification(
        verified,
        expected,
        None if verified else "signature or digest does not match",
        output_format.value,
    )


def _record_table(record: EntropyRecord) -> Table:
    table = Table(title="Entropy record", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("hash", record.hash)
    table.add_row("createdAt", record.created_at)
    table.add_row("hashIterations", str(record.hash_iterations))
    table.add_row("prevHash", record.prev_hash or "-")
    table.add_row("signature", record.signature or "-")
    table.add_row("files", str(len(record.files)))
    return table


async def _fetch_async(
    selector: EntropySelector, check: bool
) -> tuple[dict[str, Any] | None, str | None]:
    service = get_entropy_resolution_service()
    try:
        if check:
            result = await service.verify(selector)
            if not result.is_ok:
                return None, result.error.message
            return result.unwrap().to_dict(), None
        resolved = await service.resolve(selector)
        if not resolved.is_ok:
            return None, resolved.error.message
        return resolved.unwrap().to_wire(), None
    finally:
        await close_entropy_dependencies()


@app.command()
def fetch(
    commit_id: Optional[str] = typer.Option(
        None, "--commit", "-c", help="Commit id (SHA-1) of the record"
    ),
    entropy_hash: Optional[str] = typer.Option(
        None, "--hash", "-H", help="Entropy hash (SHA-256) of the record"
    ),
    check: bool = typer.Option(
        False, "--verify", help="Verify the record before printing it"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Fetch a record from the origin; the latest one by default.

    Example:
        observable-entropy fetch
        observable-entropy fetch --hash 2f8c... --verify
    """
    if commit_id and entropy_hash:
        raise typer.BadParameter("use either --commit or --hash, not both")

    selector: EntropySelector
    if commit_id:
        selector = ByCommitId(commit_id)
    elif entropy_hash:
        selector = ByHash(entropy_hash)
    else:
        selector = Latest()

    body, error = asyncio.run(_fetch_async(selector, check))
    if body is None:
        console.print(f"[red]Error:[/red] {error}", style="bold")
        raise typer.Exit(code=1)

    if output_format == OutputFormat.json:
        console.print_json(json.dumps(body))
        return

    record = EntropyRecord.model_validate(body["entropy"] if check else body)
    if check:
        console.print("[green]VERIFIED[/green]")
    console.print(_record_table(record))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("observable_entropy.api.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
