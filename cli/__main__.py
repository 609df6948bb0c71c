import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from cli import commands
from privacy_gaps import ConfigurationError

app = typer.Typer(add_completion=False)

POLICY_OPTION = typer.Option(None, "--policy", exists=True, dir_okay=False, readable=True, help="YAML policy file")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")) -> None:
    """Deterministic daily privacy gap schedules."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str, code: int) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=code)


@app.command("generate")
def generate(
    subject_id: str,
    day: str = typer.Argument(..., help="UTC calendar day (YYYY-MM-DD)"),
    policy: Optional[Path] = POLICY_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the schedule as JSON"),
) -> None:
    """Print a subject's privacy gaps for one day."""
    try:
        schedule = commands.generate(subject_id, day, policy)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}", 2)
    except ValueError as e:
        _fail(str(e), 1)
    for line in commands.print_schedule(schedule, as_json=as_json):
        typer.echo(line)


@app.command("check")
def check(
    subject_id: str,
    timestamp: str = typer.Argument(..., help="ISO-8601 instant, e.g. 2024-03-01T09:35:00Z"),
    policy: Optional[Path] = POLICY_OPTION,
) -> None:
    """Check whether an instant falls inside a privacy gap."""
    try:
        result = commands.check(subject_id, timestamp, policy)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}", 2)
    except ValueError as e:
        _fail(str(e), 1)
    for line in commands.print_check(result):
        typer.echo(line)


@app.command("export")
def export(
    subject_id: str,
    start: str = typer.Option(..., help="First UTC day (YYYY-MM-DD)"),
    end: str = typer.Option(..., help="Last UTC day, inclusive"),
    fmt: str = typer.Option("csv", help="csv or parquet"),
    output: Optional[Path] = typer.Option(None, dir_okay=False),
    policy: Optional[Path] = POLICY_OPTION,
) -> None:
    """Export a subject's schedules over a date range."""
    try:
        path = commands.export_schedules(subject_id, start, end, fmt, output, policy)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}", 2)
    except ValueError as e:
        _fail(str(e), 1)
    typer.echo(f"Exported {path}")


@app.command("validate-config")
def validate_config(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
) -> None:
    """Validate a policy file."""
    try:
        policy = commands.validate_policy(path)
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}", 2)
    typer.echo(f"{path}: OK ({len(policy.subject_ids)} subject overrides)")


if __name__ == "__main__":
    app()
