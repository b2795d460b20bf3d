"""Configuration for running TimeMachine against a local repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


@dataclass(slots=True)
class TimeMachineConfig:
    """Runtime configuration for history synthesis.

    Attributes
    ----------
    repo_path:
        Work-tree root of the repository that receives synthesized commits.
        Defaults to the current working directory at construction time.
    marker_file:
        Path, relative to ``repo_path``, of the append-only activity log that
        gives every synthesized commit something to record.
    bootstrap_date:
        Author and committer date of the root commit created when the
        repository does not exist yet.
    bootstrap_files:
        Files added by name for the root commit. When any of them is missing
        the bootstrap falls back to adding everything in the work tree.
    default_intensity:
        Weekday firing probability used when a request does not carry one.
    work_hours:
        Inclusive ``(first, last)`` hour range for synthesized commit times.
    max_commits_per_day:
        Upper bound of the uniform per-day commit count (lower bound is 1).
    weekend_factor, weekend_floor:
        Weekend probability is ``max(weekend_floor, intensity * weekend_factor)``.
    host, port:
        Listening address of the HTTP server.
    """

    repo_path: Path = field(default_factory=Path.cwd)
    marker_file: str = "data.txt"
    bootstrap_date: str = "2021-02-01T10:00:00Z"
    bootstrap_files: Tuple[str, ...] = (".gitignore", "app.py", "pyproject.toml")
    bootstrap_message: str = "chore: initial project setup"
    fallback_message: str = "chore: initial project setup (fallback)"
    commit_message: str = "feat: sync historical activity data"
    default_intensity: float = 0.5
    work_hours: Tuple[int, int] = (9, 20)
    max_commits_per_day: int = 3
    weekend_factor: float = 0.3
    weekend_floor: float = 0.05
    host: str = "127.0.0.1"
    port: int = 3000

    def marker_path(self) -> Path:
        """Return the absolute location of the marker artifact."""

        return self.resolved_repo_path() / self.marker_file

    def resolved_repo_path(self) -> Path:
        return Path(self.repo_path).resolve()
