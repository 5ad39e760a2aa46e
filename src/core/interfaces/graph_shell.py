"""Graph database command-line contract.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- The real `cypher-shell` adapter and the test doubles are interchangeable;
  the sequencer only ever sees success or failure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class GraphShell(Protocol):
    """Minimal contract for executing statements against the database.

    Design rules:
    - Calls are synchronous and block until the CLI exits.
    - A failure is reported as `False`, never raised: the caller decides
      whether to retry or ignore it.
    """

    def run_statement(self, *, user: str, password: str, statement: str) -> bool:
        """Execute a single literal statement."""

        ...

    def run_script(self, *, user: str, password: str, script: Path) -> bool:
        """Execute a batch file fed to the CLI as input."""

        ...
