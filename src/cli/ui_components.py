"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- The run command and the doctor share the same line format and tables.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.config import RunnerSettings


TAG = "cypher-runner"


def _timestamp() -> str:
    return datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")


def log_line(console: Console, message: str) -> None:
    """Prints `(cypher-runner) <date> <message>`.

    Plain text only: paths and cypher may contain `[...]`, which Rich would
    otherwise read as markup.
    """

    line = Text.assemble((f"({TAG})", "cyan"), " ", (_timestamp(), "dim"), " ", message)
    console.print(line, highlight=False, soft_wrap=True)


def print_script(console: Console, path: Path, text: str) -> None:
    """Echoes a cypher batch for audit before it is executed."""

    console.print("[SCRIPT BEGIN]", markup=False, highlight=False)
    console.print(text.rstrip("\n"), markup=False, highlight=False, soft_wrap=True)
    console.print("[SCRIPT END]", markup=False, highlight=False)


def build_settings_table(settings: RunnerSettings) -> Table:
    """Effective configuration, password masked."""

    table = Table(title="Configuration")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("GRAPH_PASSWORD", settings.masked_password())
    table.add_row("GRAPH_USER", settings.graph_user)
    table.add_row("CYPHER_ROOT", str(settings.cypher_root))
    table.add_row("CYPHER_PRE_ACTION_SLEEP", f"{settings.cypher_pre_action_sleep:g}")
    table.add_row("CYPHER_ACTION_SLEEP", f"{settings.cypher_action_sleep:g}")
    table.add_row(
        "CYPHER_MAX_ATTEMPTS",
        "unbounded" if settings.cypher_max_attempts is None else str(settings.cypher_max_attempts),
    )
    table.add_row("CYPHER_SHELL", str(settings.cypher_shell))
    table.add_row("NEO4J_dbms_directories_logs", str(settings.neo4j_dbms_directories_logs))
    table.add_row("NEO4J_dbms_directories_data", str(settings.neo4j_dbms_directories_data))
    return table


def build_checks_table() -> Table:
    table = Table(title="cypher-runner doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
