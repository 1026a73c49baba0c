from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from person_resolver.cli.utils import run_resolution
from person_resolver.core.exceptions import ResolverError

console = Console()


def stats_command(
    evidence: Path = typer.Argument(..., exists=True, readable=True, help="Evidence JSON file"),
    first: str = typer.Option(..., "--first", help="Target first name"),
    last: str = typer.Option(..., "--last", help="Target last name"),
    email: str = typer.Option("", "--email", help="Target email address"),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s"),
    biography: bool = typer.Option(False, "--biography"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging and a timing line on stderr",
    ),
):
    """
    Show a table of identity clusters for an evidence file.
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

    table = Table(title=f"Identity clusters for {first} {last}")
    table.add_column("Cluster", style="bold")
    table.add_column("Confidence", justify="right")
    table.add_column("Sources", justify="right")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Company")

    for cluster in result.clusters:
        ev = cluster.merged_evidence
        table.add_row(
            cluster.cluster_id,
            str(cluster.confidence),
            str(len(cluster.sources)),
            ev.name or "-",
            ev.email or "-",
            ev.company or "-",
        )

    console.print(table)

    analysis = result.analysis
    console.print(f"Likely same person: {'yes' if analysis.likely_same_person else 'no'}")
    console.print(f"Snippet-only sources: {result.summary.excluded_sources}")
    for action in analysis.recommended_actions:
        console.print(f"- {action}")
