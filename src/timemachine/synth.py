"""Per-day commit synthesis."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .config import TimeMachineConfig
from .dates import clone_date, is_weekend
from .git.driver import CommitOutcome, RepositoryDriver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DayResult:
    """Outcomes of every commit attempted for one calendar day."""

    day: datetime
    outcomes: List[CommitOutcome] = field(default_factory=list)

    @property
    def timestamps(self) -> List[str]:
        return [outcome.timestamp for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)


class CommitSynthesizer:
    """Decide how many commits a day receives and when they happen.

    Parameters
    ----------
    driver:
        Backend that records each synthesized commit.
    config:
        Supplies working hours, per-day maximum and weekend damping.
    rng:
        Random source; pass a seeded :class:`random.Random` for reproducible runs.
    """

    def __init__(
        self,
        driver: RepositoryDriver,
        config: TimeMachineConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.driver = driver
        self.config = config or TimeMachineConfig()
        self.rng = rng or random.Random()

    def probability(self, day: datetime, intensity: float) -> float:
        if is_weekend(day):
            return max(self.config.weekend_floor, intensity * self.config.weekend_factor)
        return intensity

    def plan_day(self, day: datetime, intensity: float) -> List[datetime]:
        """Draw the commit times for ``day`` without touching the repository."""

        if self.rng.random() >= self.probability(day, intensity):
            return []

        first_hour, last_hour = self.config.work_hours
        count = self.rng.randint(1, self.config.max_commits_per_day)
        moments = []
        for _ in range(count):
            hour = self.rng.randint(first_hour, last_hour)
            minute = self.rng.randint(0, 59)
            moments.append(
                clone_date(day).replace(hour=hour, minute=minute, second=0, microsecond=0)
            )
        return moments

    def synthesize_day(self, day: datetime, intensity: float) -> DayResult:
        result = DayResult(day=day)
        for moment in self.plan_day(day, intensity):
            outcome = self.driver.commit(moment)
            if not outcome.succeeded:
                logger.warning("Dropping event %s: %s", outcome.timestamp, outcome.error)
            result.outcomes.append(outcome)
        return result
