"""Version-control integration for materializing synthesized history."""

from .driver import CommitOutcome, CommitStatus, GitDriver, RepositoryDriver

__all__ = [
    "CommitOutcome",
    "CommitStatus",
    "GitDriver",
    "RepositoryDriver",
]
