"""Doctor command for environment diagnostics.

Read-only: it inspects the same files the run command uses and never
creates, removes or executes anything.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from adapters.markers import count_matching_lines
from cli.ui_components import build_checks_table, build_settings_table
from core.config import RunnerSettings
from core.domain.models import RunnerPaths
from core.services.startup_sequence import (
    PASSWORD_CHANGE_REQUIRED,
    READY_PHRASE,
    paths_from_settings,
)

_console = Console()


@dataclass
class Check:
    name: str
    status: str
    details: str


def _check_shell(settings: RunnerSettings) -> Check:
    shell = settings.cypher_shell
    if shell.is_file() and os.access(shell, os.X_OK):
        return Check("cypher-shell", "OK", str(shell))
    found = shutil.which(str(shell))
    if found:
        return Check("cypher-shell", "OK", found)
    return Check("cypher-shell", "FAIL", f"{shell} not found or not executable")


def _check_ready(paths: RunnerPaths) -> Check:
    if not paths.debug_log.is_file():
        return Check("Ready line", "WAITING", f"{paths.debug_log} does not exist")
    count = count_matching_lines(paths.debug_log, READY_PHRASE)
    if count == 1:
        return Check("Ready line", "OK", READY_PHRASE)
    if count == 0:
        return Check("Ready line", "WAITING", "Database has not reported ready")
    return Check("Ready line", "FAIL", f"Ready line found {count} times (exactly 1 expected)")


def _check_auth(paths: RunnerPaths) -> Check:
    if not paths.auth_file.is_file():
        return Check("Auth file", "WAITING", f"{paths.auth_file} does not exist")
    count = count_matching_lines(paths.auth_file, PASSWORD_CHANGE_REQUIRED)
    if count == 0:
        return Check("Auth file", "OK", "Default password already changed")
    if count == 1:
        return Check("Auth file", "PENDING", "Default password change required")
    return Check("Auth file", "FAIL", f"Change marker found {count} times (exactly 1 expected)")


def _presence(name: str, path: Path, *, present: str, absent: str) -> Check:
    if path.exists():
        return Check(name, present, str(path))
    return Check(name, absent, str(path))


def collect_checks(settings: RunnerSettings) -> list[Check]:
    """Every diagnostic, in display order."""

    paths = paths_from_settings(settings)
    checks = [
        Check(
            "GRAPH_PASSWORD",
            "OK" if settings.has_password else "MISSING",
            "Set" if settings.has_password else "Runner will skip (exit 0)",
        ),
        _check_shell(settings),
        _presence("Once script", paths.once_script, present="PRESENT", absent="ABSENT"),
        _presence("Always script", paths.always_script, present="PRESENT", absent="ABSENT"),
        _presence("Once marker", paths.once_marker, present="EXECUTED", absent="PENDING"),
        _presence("Always marker", paths.always_marker, present="EXECUTED", absent="PENDING"),
        _check_ready(paths),
        _check_auth(paths),
    ]
    return checks


def run() -> None:
    """Run baseline diagnostics against the configured directories."""

    settings = RunnerSettings()

    _console.print(build_settings_table(settings))

    table = build_checks_table()
    for check in collect_checks(settings):
        table.add_row(check.name, check.status, check.details)
    _console.print(table)

    if not settings.has_password:
        _console.print(
            "\n[yellow]Note:[/yellow] Without GRAPH_PASSWORD the run command exits immediately."
        )
