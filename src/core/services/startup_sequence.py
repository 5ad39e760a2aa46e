"""Container startup sequence for the graph database.

This module owns the whole start-up flow: wait for the database to become
ready, change the default admin password once, then run the "once" and
"always" cypher batches. Each `Stage` maps to exactly one method; waits go
through `poll_until` so a bounded policy and a fake sleep make every stage
testable without a database.

Side effects towards the user (printing) stay out of here and go through
`SequenceHooks`, which the CLI renders.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from adapters.markers import count_matching_lines, read_script, remove_marker, touch_marker
from core.config import RunnerSettings
from core.domain.models import BatchOutcome, RunnerPaths, RunReport
from core.domain.stages import Stage
from core.interfaces.clock import Sleeper
from core.interfaces.graph_shell import GraphShell
from core.polling import PollPolicy, poll_until


READY_PHRASE = "Database graph.db is ready."
PASSWORD_CHANGE_REQUIRED = "password_change_required"
DEFAULT_PASSWORD = "neo4j"
SETTLE_DELAY_SECONDS = 4.0


@dataclass
class SequenceHooks:
    """Optional callbacks for UI layers (log lines, script echo, stage changes)."""

    log: Callable[[str], None] | None = None
    script: Callable[[Path, str], None] | None = None
    stage: Callable[[Stage], None] | None = None


def paths_from_settings(settings: RunnerSettings) -> RunnerPaths:
    return RunnerPaths.from_directories(
        root=settings.cypher_root,
        log_dir=settings.neo4j_dbms_directories_logs,
        data_dir=settings.neo4j_dbms_directories_data,
    )


def change_password_statement(password: str) -> str:
    """Cypher call that replaces the default password with `password`."""

    quoted = password.replace("\\", "\\\\").replace("'", "\\'")
    return f"CALL dbms.changePassword('{quoted}')"


def _seconds(value: float) -> str:
    return f"{value:g}"


class StartupSequencer:
    """Runs every `Stage` in order against one database container."""

    def __init__(
        self,
        *,
        settings: RunnerSettings,
        shell: GraphShell,
        sleep: Sleeper = time.sleep,
        hooks: SequenceHooks | None = None,
        paths: RunnerPaths | None = None,
    ) -> None:
        self.settings = settings
        self.shell = shell
        self.sleep = sleep
        self.hooks = hooks or SequenceHooks()
        self.paths = paths or paths_from_settings(settings)
        self.policy = PollPolicy(
            interval=settings.cypher_action_sleep,
            max_attempts=settings.cypher_max_attempts,
        )
        self._handlers: dict[Stage, Callable[[RunReport], None]] = {
            Stage.RESET_MARKER: self.reset_marker,
            Stage.PRE_DELAY: self.pre_delay,
            Stage.WAIT_LOG: self.wait_for_log,
            Stage.WAIT_READY: self.wait_for_ready,
            Stage.POST_READY_PAUSE: self.post_ready_pause,
            Stage.WAIT_AUTH_FILE: self.wait_for_auth_file,
            Stage.PRE_PASSWORD_PAUSE: self.pre_password_pause,
            Stage.CHANGE_CREDENTIAL: self.change_credential,
            Stage.WAIT_CREDENTIAL_CONFIRMED: self.wait_for_credential_change,
            Stage.SETTLE_DELAY: self.settle_delay,
            Stage.RUN_ONCE: self.run_once,
            Stage.MARK_ONCE: self.mark_once,
            Stage.RUN_ALWAYS: self.run_always,
            Stage.MARK_ALWAYS: self.mark_always,
            Stage.FINISHED: self.finish,
        }

    # ------------------------------------------------------------------ run

    def run(self) -> RunReport:
        report = RunReport()
        self._enter(Stage.CREDENTIAL_CHECK)
        report.stages.append(Stage.CREDENTIAL_CHECK)
        if not self.check_credential():
            report.skipped = True
            return report

        for stage in Stage.sequence():
            if stage is Stage.CREDENTIAL_CHECK:
                continue
            self._enter(stage)
            self._handlers[stage](report)
            report.stages.append(stage)
        return report

    # --------------------------------------------------------------- stages

    def check_credential(self) -> bool:
        if self.settings.has_password:
            return True
        self._log("No GRAPH_PASSWORD. Can't run without this.")
        return False

    def reset_marker(self, report: RunReport) -> None:
        if not remove_marker(self.paths.always_marker):
            self._log(f"Could not remove {self.paths.always_marker} (ignored)")

        s = self.settings
        self._log(f"NEO4J_dbms_directories_data={s.neo4j_dbms_directories_data}")
        self._log(f"NEO4J_dbms_directories_logs={s.neo4j_dbms_directories_logs}")
        self._log(f"GRAPH_USER={s.graph_user}")
        self._log(f"GRAPH_PASSWORD={s.masked_password()}")
        self._log(f"ONCE_SCRIPT={self.paths.once_script}")
        self._log(f"ALWAYS_SCRIPT={self.paths.always_script}")
        self._log(f"ONCE_EXECUTED_FILE={self.paths.once_marker}")
        self._log(f"ALWAYS_EXECUTED_FILE={self.paths.always_marker}")
        self._log(f"PRE_ACTION_SLEEP_TIME={_seconds(s.cypher_pre_action_sleep)}")
        self._log(f"ACTION_SLEEP_TIME={_seconds(s.cypher_action_sleep)}")

    def pre_delay(self, report: RunReport) -> None:
        seconds = self.settings.cypher_pre_action_sleep
        self._log(f"Pre-action sleep ({_seconds(seconds)} seconds)...")
        self.sleep(seconds)

    def wait_for_log(self, report: RunReport) -> None:
        debug_log = self.paths.debug_log
        self._log(f"Checking {debug_log}...")
        self._poll(
            debug_log.is_file,
            description=str(debug_log),
            waiting=f"Waiting for {debug_log}...",
        )

    def wait_for_ready(self, report: RunReport) -> None:
        debug_log = self.paths.debug_log
        self._log(f"Checking ready line in {debug_log}...")
        # Exactly one ready line; a log that says it twice is not trusted.
        self._poll(
            lambda: count_matching_lines(debug_log, READY_PHRASE) == 1,
            description=f"ready line in {debug_log}",
            waiting=f"Waiting for ready line in {debug_log}...",
        )

    def post_ready_pause(self, report: RunReport) -> None:
        self._log("Post ready pause...")
        self.sleep(self.settings.cypher_action_sleep)

    def wait_for_auth_file(self, report: RunReport) -> None:
        auth_file = self.paths.auth_file
        self._log(f"Checking {auth_file}...")
        self._poll(
            auth_file.is_file,
            description=str(auth_file),
            waiting=f"Waiting for {auth_file}...",
        )

    def pre_password_pause(self, report: RunReport) -> None:
        self._log("Pre password pause...")
        self.sleep(self.settings.cypher_action_sleep)

    def change_credential(self, report: RunReport) -> None:
        if self._password_change_count() != 1:
            return

        self._log(f"Setting {self.settings.graph_user} password...")
        report.credential_change_attempted = True
        ok = self.shell.run_statement(
            user=self.settings.graph_user,
            password=DEFAULT_PASSWORD,
            statement=change_password_statement(self.settings.graph_password or ""),
        )
        report.credential_change_succeeded = ok
        if not ok:
            # Too early and the change is lost; confirmation polling shows it.
            self._log("Password change failed (ignored).")

    def wait_for_credential_change(self, report: RunReport) -> None:
        self._log(f"Checking {self.settings.graph_user} password...")
        self._poll(
            lambda: self._password_change_count() == 0,
            description="password change",
            waiting=f"Waiting for {self.settings.graph_user} password...",
        )

    def settle_delay(self, report: RunReport) -> None:
        self._log("Post password pause...")
        self.sleep(SETTLE_DELAY_SECONDS)

    def run_once(self, report: RunReport) -> None:
        if self.paths.once_marker.exists():
            report.once = BatchOutcome.ALREADY_EXECUTED
        elif not self.paths.once_script.is_file():
            report.once = BatchOutcome.NO_SCRIPT
        else:
            report.once_attempts = self._execute_script(self.paths.once_script)
            report.once = BatchOutcome.EXECUTED
            self._log(".once script executed.")
            return
        self._log("No .once script (or not first incarnation).")

    def mark_once(self, report: RunReport) -> None:
        self._log(f"Touching {self.paths.once_marker}...")
        touch_marker(self.paths.once_marker)

    def run_always(self, report: RunReport) -> None:
        if not self.paths.always_script.is_file():
            report.always = BatchOutcome.NO_SCRIPT
            self._log("No .always script.")
            return
        report.always_attempts = self._execute_script(self.paths.always_script)
        report.always = BatchOutcome.EXECUTED
        self._log(".always script executed.")

    def mark_always(self, report: RunReport) -> None:
        self._log(f"Touching {self.paths.always_marker}...")
        touch_marker(self.paths.always_marker)

    def finish(self, report: RunReport) -> None:
        self._log("Finished.")

    # -------------------------------------------------------------- helpers

    def _execute_script(self, script: Path) -> int:
        """Echo `script` and run it until the CLI succeeds; returns invocations."""

        self._log(f"Trying {script}...")
        if self.hooks.script:
            self.hooks.script(script, read_script(script))

        attempts = 0

        def attempt() -> bool:
            nonlocal attempts
            attempts += 1
            return self.shell.run_script(
                user=self.settings.graph_user,
                password=self.settings.graph_password or "",
                script=script,
            )

        self._poll(attempt, description=str(script), waiting="No joy, waiting...")
        return attempts

    def _password_change_count(self) -> int:
        return count_matching_lines(self.paths.auth_file, PASSWORD_CHANGE_REQUIRED)

    def _poll(self, condition: Callable[[], bool], *, description: str, waiting: str) -> int:
        return poll_until(
            condition,
            policy=self.policy,
            sleep=self.sleep,
            description=description,
            on_wait=lambda _n: self._log(waiting),
        )

    def _enter(self, stage: Stage) -> None:
        if self.hooks.stage:
            self.hooks.stage(stage)

    def _log(self, message: str) -> None:
        if self.hooks.log:
            self.hooks.log(message)
