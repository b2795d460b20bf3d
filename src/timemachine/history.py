"""Range orchestration and reset for synthesized history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .dates import add_days
from .git.driver import CommitStatus, RepositoryDriver
from .synth import CommitSynthesizer
from .validation import HistoryRequest

logger = logging.getLogger(__name__)

NO_REPOSITORY_MESSAGE = "No git repository found. Nothing to reset."
RESET_MESSAGE = "History reset to initial commit. Ready for a new timeline."
GENERATED_MESSAGE = "Time travel successful!"


@dataclass(slots=True)
class HistoryResult:
    """Aggregate of a completed range generation."""

    request: HistoryRequest
    commits: List[str] = field(default_factory=list)
    days_visited: int = 0
    failed_events: int = 0
    noop_events: int = 0

    @property
    def total_commits(self) -> int:
        return len(self.commits)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": GENERATED_MESSAGE,
            "stats": {
                "totalCommits": self.total_commits,
                "period": {"start": self.request.raw_start, "end": self.request.raw_end},
                "appliedIntensity": self.request.intensity,
                "failedEvents": self.failed_events,
                "noopEvents": self.noop_events,
            },
            "commits": list(self.commits),
        }


@dataclass(slots=True)
class ResetResult:
    message: str
    reset_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message}
        if self.reset_to is not None:
            payload["resetTo"] = self.reset_to
        return payload


def generate_history(
    request: HistoryRequest,
    driver: RepositoryDriver,
    synthesizer: CommitSynthesizer,
) -> HistoryResult:
    """Walk ``request.period`` day by day and synthesize commits for each.

    The repository is bootstrapped once before the first day. Per-event
    commit failures are counted and skipped; anything the driver raises
    aborts the run and leaves already-made commits in place.

    Parameters
    ----------
    request:
        Validated range and intensity.
    driver:
        Backend shared with ``synthesizer``.
    synthesizer:
        Per-day commit generator.

    Returns
    -------
    :class:`HistoryResult` with commit timestamps in day order.
    """

    driver.ensure_initialized()

    result = HistoryResult(request=request)
    current = request.period.start
    end = request.period.end
    while current <= end:
        day = synthesizer.synthesize_day(current, request.intensity)
        result.commits.extend(day.timestamps)
        result.failed_events += day.failed
        result.noop_events += sum(
            1 for outcome in day.outcomes if outcome.status is CommitStatus.NOTHING_TO_COMMIT
        )
        result.days_visited += 1
        current = add_days(current, 1)

    logger.info(
        "Generated %d commits across %d days (%d failed)",
        result.total_commits,
        result.days_visited,
        result.failed_events,
    )
    return result


def reset_history(driver: RepositoryDriver) -> ResetResult:
    """Drop every synthesized commit by resetting to the root commit.

    Raises
    ------
    RepositoryError
        If the root commit cannot be resolved or the reset fails.
    """

    if not driver.is_initialized():
        return ResetResult(message=NO_REPOSITORY_MESSAGE)

    root = driver.reset_to_root()
    return ResetResult(message=RESET_MESSAGE, reset_to=root)
