"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking them
  into the CLI or the sequencer.
- Built once at startup and passed around; the object is frozen so no stage
  can change what another stage sees.

Field names mirror the container's environment variables (matched
case-insensitively), e.g. `NEO4J_dbms_directories_logs`. A variable set to
an empty string counts as unset, like `${VAR:-default}` in a shell.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CYPHER_SHELL = Path("/var/lib/neo4j/bin/cypher-shell")


class RunnerSettings(BaseSettings):
    """Startup-sequencer configuration.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars): a bad delay fails loudly
      before anything sleeps.
    - A single configuration contract for the CLI, the doctor and the tests.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    graph_password: str | None = Field(
        default=None,
        description="Admin password to set. Absent or empty means the runner skips.",
    )
    graph_user: str = Field(
        default="neo4j",
        min_length=1,
        description="Database user for the password change and the cypher batches.",
    )
    cypher_root: Path = Field(
        default=Path("/"),
        description="Base directory holding the `cypher-script` directory.",
    )
    cypher_pre_action_sleep: float = Field(
        default=60,
        ge=0,
        description="Seconds to sleep before the first readiness check.",
    )
    cypher_action_sleep: float = Field(
        default=12,
        ge=0,
        description="Seconds between poll retries (and for the fixed pauses).",
    )
    cypher_max_attempts: int | None = Field(
        default=None,
        ge=0,
        description="Optional bound on waits per polling loop (unset = unbounded).",
    )
    cypher_shell: Path = Field(
        default=DEFAULT_CYPHER_SHELL,
        description="Path to the cypher-shell executable.",
    )
    neo4j_dbms_directories_logs: Path = Field(
        default=Path("/"),
        description="Neo4j log directory (contains debug.log).",
    )
    neo4j_dbms_directories_data: Path = Field(
        default=Path("/"),
        description="Neo4j data directory (contains dbms/auth).",
    )

    @property
    def has_password(self) -> bool:
        return bool(self.graph_password)

    def masked_password(self) -> str:
        """Password suitable for log output."""

        if not self.graph_password:
            return "<unset>"
        return "*" * len(self.graph_password)
