from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from adapters.cypher_shell import CypherShell
from core.interfaces.graph_shell import GraphShell


class _Recorder:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: list[tuple[list[str], dict[str, Any]]] = []
        self.stdin_payloads: list[bytes] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append((cmd, kwargs))
        stdin = kwargs.get("stdin")
        if stdin is not None:
            self.stdin_payloads.append(stdin.read())
        return subprocess.CompletedProcess(cmd, self.returncode)


def test_satisfies_graph_shell_protocol() -> None:
    assert isinstance(CypherShell(), GraphShell)


def test_run_statement_passes_credentials_and_statement(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _Recorder()
    monkeypatch.setattr(subprocess, "run", recorder)

    ok = CypherShell("/opt/cypher-shell").run_statement(
        user="neo4j",
        password="neo4j",
        statement="CALL dbms.changePassword('x')",
    )

    assert ok is True
    cmd, kwargs = recorder.calls[0]
    assert cmd == ["/opt/cypher-shell", "-u", "neo4j", "-p", "neo4j", "CALL dbms.changePassword('x')"]
    assert kwargs["check"] is False


def test_run_script_feeds_file_on_stdin(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    recorder = _Recorder()
    monkeypatch.setattr(subprocess, "run", recorder)
    script = tmp_path / "cypher-script.always"
    script.write_text("RETURN 1;\n", encoding="utf-8")

    ok = CypherShell("cypher-shell").run_script(user="neo4j", password="pw", script=script)

    assert ok is True
    cmd, _ = recorder.calls[0]
    assert cmd == ["cypher-shell", "-u", "neo4j", "-p", "pw"]
    assert recorder.stdin_payloads == [b"RETURN 1;\n"]


def test_nonzero_exit_is_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(subprocess, "run", _Recorder(returncode=1))

    assert CypherShell().run_statement(user="neo4j", password="pw", statement="RETURN 1") is False


def test_missing_binary_is_failure(tmp_path: Path) -> None:
    shell = CypherShell(tmp_path / "does-not-exist")

    assert shell.run_statement(user="neo4j", password="pw", statement="RETURN 1") is False


def test_missing_script_is_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    recorder = _Recorder()
    monkeypatch.setattr(subprocess, "run", recorder)

    ok = CypherShell().run_script(user="neo4j", password="pw", script=tmp_path / "gone")

    assert ok is False
    assert recorder.calls == []


def test_from_settings_uses_configured_executable(make_settings) -> None:
    settings = make_settings(cypher_shell=Path("/usr/local/bin/cypher-shell"))

    assert CypherShell.from_settings(settings).executable == Path("/usr/local/bin/cypher-shell")

