from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from person_resolver.cli.utils import run_resolution, write_json
from person_resolver.core.exceptions import ResolverError
from person_resolver.exporter import result_to_dict

console = Console(stderr=True)


def resolve_command(
    evidence: Path = typer.Argument(..., exists=True, readable=True, help="Evidence JSON file"),
    first: str = typer.Option(..., "--first", help="Target first name"),
    last: str = typer.Option(..., "--last", help="Target last name"),
    email: str = typer.Option("", "--email", help="Target email address"),
    strategy: Optional[str] = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Clustering strategy: incremental or feature_vector",
    ),
    biography: bool = typer.Option(
        False,
        "--biography",
        help="Add biographical profiling to confidence scoring",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        readable=True,
        help="Alternate YAML configuration",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging and a timing line on stderr",
    ),
):
    """
    Resolve evidence about one person into identity clusters (JSON output).
    """
    try:
        result = run_resolution(
            evidence,
            first=first,
            last=last,
            email=email,
            strategy=strategy,
            biography=biography,
            config_path=config,
            verbose=verbose,
        )
    except ResolverError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=2)

    write_json(result_to_dict(result), out=out, pretty=pretty)

    if verbose:
        console.log("Export complete")
