from __future__ import annotations

import typer

from person_resolver.cli.commands.resolve import resolve_command
from person_resolver.cli.commands.stats import stats_command

app = typer.Typer(
    name="person-resolver",
    help="Resolve web evidence about a person into identity clusters",
    add_completion=False,
)

app.command("resolve")(resolve_command)
app.command("stats")(stats_command)


def main():
    app()


if __name__ == "__main__":
    main()
