"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict, self-documenting structures (Field) without coupling the core to
  subprocesses or the filesystem.
- The run report serializes cleanly for the CLI and for tests.

Note:
- These models describe *what* the sequencer works with, not *how* it is
  inspected or executed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.stages import Stage


SCRIPT_DIR_NAME = "cypher-script"
ONCE_SCRIPT_NAME = "cypher-script.once"
ALWAYS_SCRIPT_NAME = "cypher-script.always"
ONCE_MARKER_NAME = "once.executed"
ALWAYS_MARKER_NAME = "always.executed"
DEBUG_LOG_NAME = "debug.log"
AUTH_FILE_RELATIVE = Path("dbms") / "auth"


class BatchOutcome(str, Enum):
    """What happened to a cypher batch during a run."""

    EXECUTED = "executed"
    ALREADY_EXECUTED = "already_executed"
    NO_SCRIPT = "no_script"


class RunnerPaths(BaseModel):
    """Every file the sequencer reads or writes.

    Derived once from the configured directories so the stages never build
    paths themselves.
    """

    model_config = ConfigDict(frozen=True)

    script_dir: Path = Field(..., description="Directory holding batches and markers.")
    once_script: Path = Field(..., description="Batch executed on first incarnation.")
    always_script: Path = Field(..., description="Batch executed on every start.")
    once_marker: Path = Field(..., description="Created after the once step; never removed.")
    always_marker: Path = Field(..., description="Removed at start, created after the always step.")
    debug_log: Path = Field(..., description="Database debug log polled for readiness.")
    auth_file: Path = Field(..., description="Database auth-state file.")

    @classmethod
    def from_directories(cls, *, root: Path, log_dir: Path, data_dir: Path) -> "RunnerPaths":
        script_dir = root / SCRIPT_DIR_NAME
        return cls(
            script_dir=script_dir,
            once_script=script_dir / ONCE_SCRIPT_NAME,
            always_script=script_dir / ALWAYS_SCRIPT_NAME,
            once_marker=script_dir / ONCE_MARKER_NAME,
            always_marker=script_dir / ALWAYS_MARKER_NAME,
            debug_log=log_dir / DEBUG_LOG_NAME,
            auth_file=data_dir / AUTH_FILE_RELATIVE,
        )


class RunReport(BaseModel):
    """Summary of a single sequencer invocation."""

    skipped: bool = Field(
        default=False,
        description="True when the run stopped at the credential check.",
    )
    stages: list[Stage] = Field(
        default_factory=list,
        description="Stages completed, in order.",
    )
    credential_change_attempted: bool = Field(
        default=False,
        description="Whether the default password change was invoked.",
    )
    credential_change_succeeded: bool | None = Field(
        default=None,
        description="Exit status of that invocation (None when not attempted).",
    )
    once: BatchOutcome | None = Field(default=None, description="Outcome of the once step.")
    always: BatchOutcome | None = Field(default=None, description="Outcome of the always step.")
    once_attempts: int = Field(default=0, ge=0, description="Invocations of the once batch.")
    always_attempts: int = Field(default=0, ge=0, description="Invocations of the always batch.")
