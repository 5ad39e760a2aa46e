"""Stages of the startup sequence.

The sequence is strictly linear; a stage never re-enters an earlier one.
Polling and retrying happen inside a single stage.
"""

from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    """Named steps of the startup sequence, in execution order."""

    CREDENTIAL_CHECK = "credential_check"
    RESET_MARKER = "reset_marker"
    PRE_DELAY = "pre_delay"
    WAIT_LOG = "wait_log"
    WAIT_READY = "wait_ready"
    POST_READY_PAUSE = "post_ready_pause"
    WAIT_AUTH_FILE = "wait_auth_file"
    PRE_PASSWORD_PAUSE = "pre_password_pause"
    CHANGE_CREDENTIAL = "change_credential"
    WAIT_CREDENTIAL_CONFIRMED = "wait_credential_confirmed"
    SETTLE_DELAY = "settle_delay"
    RUN_ONCE = "run_once"
    MARK_ONCE = "mark_once"
    RUN_ALWAYS = "run_always"
    MARK_ALWAYS = "mark_always"
    FINISHED = "finished"

    @classmethod
    def sequence(cls) -> tuple["Stage", ...]:
        """Every stage in the order the sequencer runs them."""

        return tuple(cls)

    def label(self) -> str:
        """Human readable label for logs and tables."""

        return self.value.replace("_", " ")
