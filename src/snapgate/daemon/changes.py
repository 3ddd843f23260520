"""Polling state machine for asynchronous snapd changes."""
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import ChangeStatus, Constants
from ..errors import OperationFailed, OperationTimeout
from .client import SnapdClient
from .models import Change

logger = logging.getLogger(__name__)


class ChangePhase(Enum):
    """Coarse classification of a daemon status string."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


def classify_status(status: Optional[str]) -> ChangePhase:
    """Map a daemon status onto a phase.

    Unrecognized statuses are PENDING and count toward the attempt ceiling.
    """
    if status == ChangeStatus.DONE.value:
        return ChangePhase.SUCCESS
    if status in Constants.FAILURE_STATUSES:
        return ChangePhase.FAILURE
    return ChangePhase.PENDING


class ChangeTracker:
    """Wait for a single change to reach a terminal status."""

    def __init__(
        self,
        client: SnapdClient,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the tracker.

        Args:
            client: Client used to query ``/v2/changes/{id}``.
            poll_interval: Seconds between polls (defaults to Constants.CHANGE_POLL_INTERVAL_SEC).
            max_attempts: Pending polls tolerated before giving up (defaults to
                Constants.CHANGE_MAX_ATTEMPTS).
            sleep: Sleep function, injectable for tests.
        """
        self.client = client
        self.poll_interval = (
            Constants.CHANGE_POLL_INTERVAL_SEC if poll_interval is None else poll_interval
        )
        self.max_attempts = Constants.CHANGE_MAX_ATTEMPTS if max_attempts is None else max_attempts
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._sleep = sleep

    def fetch(self, change_id: str) -> Change:
        """Query a change once and decode it.

        Raises:
            DaemonError: if the daemon answers with an error-typed response.
        """
        response = self.client.get_change(change_id)
        response.raise_for_error()
        return Change.from_json(response.result)

    def wait(self, change_id: str) -> Change:
        """Poll until the change is Done.

        Returns:
            The final change state.

        Raises:
            OperationFailed: when the change reaches Abort, Hold or Error.
            OperationTimeout: when ``max_attempts`` polls all came back pending.
        """
        attempts = 0
        while True:
            change = self.fetch(change_id)
            phase = classify_status(change.status)
            if is_debug_enabled(logger):
                logger.debug(
                    "Change status",
                    extra=extra_context(
                        event="change_poll",
                        component="change_tracker",
                        change_id=change_id,
                        status=change.status,
                        attempt=attempts + 1,
                    ),
                )
            if phase is ChangePhase.SUCCESS:
                logger.info("Change %s done", change_id)
                return change
            if phase is ChangePhase.FAILURE:
                logger.error("Change %s finished with status %s", change_id, change.status)
                raise OperationFailed(change.status, change.raw)
            attempts += 1
            if attempts >= self.max_attempts:
                raise OperationTimeout(attempts, change_id)
            self._sleep(self.poll_interval)
