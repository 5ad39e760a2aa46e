"""`cypher-shell` wrapper.

Why a wrapper:
- Standardizes how the CLI is invoked (credentials, statement vs. batch on
  stdin) so the sequencer only deals with success/failure.
- Easy to test: the sequencer accepts any `GraphShell`, and this class can
  be exercised by patching `subprocess.run`.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from core.config import DEFAULT_CYPHER_SHELL, RunnerSettings


class CypherShell:
    """Runs statements through the database CLI, inheriting stdout/stderr."""

    def __init__(self, executable: Path | str = DEFAULT_CYPHER_SHELL) -> None:
        self.executable = Path(executable)

    @classmethod
    def from_settings(cls, settings: RunnerSettings) -> "CypherShell":
        return cls(settings.cypher_shell)

    def command(self, *, user: str, password: str) -> list[str]:
        return [str(self.executable), "-u", user, "-p", password]

    def run_statement(self, *, user: str, password: str, statement: str) -> bool:
        cmd = self.command(user=user, password=password)
        cmd.append(statement)
        return self._run(cmd)

    def run_script(self, *, user: str, password: str, script: Path) -> bool:
        cmd = self.command(user=user, password=password)
        try:
            with script.open("rb") as handle:
                return self._run(cmd, stdin=handle)
        except FileNotFoundError:
            return False

    def _run(self, cmd: list[str], **kwargs: object) -> bool:
        try:
            completed = subprocess.run(cmd, check=False, **kwargs)  # type: ignore[call-overload]
        except OSError:
            # Missing or non-executable binary counts as a failed invocation.
            return False
        return completed.returncode == 0
