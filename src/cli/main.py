"""cypher-runner command-line application (Typer).

`run` is what the container entrypoint calls; `doctor` is for humans
debugging a container that seems stuck.
"""

from __future__ import annotations

import time

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.cypher_shell import CypherShell
from cli import doctor
from cli.ui_components import log_line, print_script
from core.config import RunnerSettings
from core.polling import PollExhausted
from core.services.startup_sequence import SequenceHooks, StartupSequencer

app = typer.Typer(
    no_args_is_help=True,
    help="Wait for the graph database, set its password and run cypher batches.",
)

_console = Console()


def _load_settings() -> RunnerSettings:
    try:
        return RunnerSettings()
    except ValidationError as exc:
        log_line(_console, f"Invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc


def build_sequencer(settings: RunnerSettings) -> StartupSequencer:
    hooks = SequenceHooks(
        log=lambda message: log_line(_console, message),
        script=lambda path, text: print_script(_console, path, text),
    )
    return StartupSequencer(
        settings=settings,
        shell=CypherShell.from_settings(settings),
        sleep=time.sleep,
        hooks=hooks,
    )


@app.command(name="run")
def run_command() -> None:
    """Run the full startup sequence (exit 0 also when GRAPH_PASSWORD is unset)."""

    settings = _load_settings()
    sequencer = build_sequencer(settings)
    try:
        sequencer.run()
    except PollExhausted as exc:
        log_line(_console, str(exc))
        raise typer.Exit(code=1) from exc


@app.command(name="doctor")
def doctor_command() -> None:
    """Show the effective configuration and the state of every watched file."""

    try:
        doctor.run()
    except ValidationError as exc:
        log_line(_console, f"Invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc


def run() -> None:
    app()


if __name__ == "__main__":
    run()
