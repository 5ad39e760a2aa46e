"""Pytest fixtures for cypher-runner tests.

Nothing here talks to a database or really sleeps: the graph shell and the
sleep function are fakes, and every directory lives under `tmp_path`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from core.config import RunnerSettings
from core.domain.models import RunnerPaths
from core.services.startup_sequence import READY_PHRASE, paths_from_settings

_ENV_VARS = (
    "GRAPH_PASSWORD",
    "GRAPH_USER",
    "CYPHER_ROOT",
    "CYPHER_PRE_ACTION_SLEEP",
    "CYPHER_ACTION_SLEEP",
    "CYPHER_MAX_ATTEMPTS",
    "CYPHER_SHELL",
    "NEO4J_dbms_directories_logs",
    "NEO4J_dbms_directories_data",
)

AUTH_PENDING = "neo4j:SHA-256,C84A0000:password_change_required\n"
AUTH_DONE = "neo4j:SHA-256,C84A0000:\n"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the host environment and any stray .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., RunnerSettings]:
    def _make(**overrides: object) -> RunnerSettings:
        values: dict[str, object] = {
            "graph_password": "s3cret",
            "cypher_root": tmp_path / "root",
            "neo4j_dbms_directories_logs": tmp_path / "logs",
            "neo4j_dbms_directories_data": tmp_path / "data",
            "cypher_pre_action_sleep": 60,
            "cypher_action_sleep": 12,
            "cypher_max_attempts": 50,
        }
        values.update(overrides)
        return RunnerSettings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., RunnerSettings]) -> RunnerSettings:
    return make_settings()


@pytest.fixture
def paths(settings: RunnerSettings) -> RunnerPaths:
    return paths_from_settings(settings)


def write_ready_database(paths: RunnerPaths, *, auth: str = AUTH_DONE) -> None:
    """Debug log with one ready line and an auth file."""
    paths.debug_log.parent.mkdir(parents=True, exist_ok=True)
    paths.debug_log.write_text(f"starting\n{READY_PHRASE}\n", encoding="utf-8")
    paths.auth_file.parent.mkdir(parents=True, exist_ok=True)
    paths.auth_file.write_text(auth, encoding="utf-8")


@dataclass
class FakeSleep:
    """Records every sleep and runs a scheduled action on the n-th call."""

    calls: list[float] = field(default_factory=list)
    actions: dict[int, Callable[[], None]] = field(default_factory=dict)

    def at(self, call_number: int, action: Callable[[], None]) -> None:
        self.actions[call_number] = action

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        action = self.actions.get(len(self.calls))
        if action:
            action()


@dataclass
class FakeShell:
    """GraphShell double: scripted results, full call log."""

    statement_results: list[bool] = field(default_factory=list)
    script_results: list[bool] = field(default_factory=list)
    statements: list[tuple[str, str, str]] = field(default_factory=list)
    scripts: list[tuple[str, str, Path]] = field(default_factory=list)
    on_statement: Callable[[str], None] | None = None
    on_script: Callable[[Path], None] | None = None

    def run_statement(self, *, user: str, password: str, statement: str) -> bool:
        self.statements.append((user, password, statement))
        if self.on_statement:
            self.on_statement(statement)
        return self.statement_results.pop(0) if self.statement_results else True

    def run_script(self, *, user: str, password: str, script: Path) -> bool:
        self.scripts.append((user, password, script))
        if self.on_script:
            self.on_script(script)
        return self.script_results.pop(0) if self.script_results else True


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def fake_shell() -> FakeShell:
    return FakeShell()
