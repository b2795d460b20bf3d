"""Repository driver that materializes synthesized commits with git."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Protocol

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..config import TimeMachineConfig
from ..dates import format_timestamp
from ..errors import RepositoryError

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT = "nothing to commit"


class CommitStatus(str, enum.Enum):
    COMMITTED = "committed"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    FAILED = "failed"


@dataclass(slots=True)
class CommitOutcome:
    """Result of a single :meth:`RepositoryDriver.commit` call.

    ``NOTHING_TO_COMMIT`` counts as success: the activity line was still
    appended to the marker artifact even though git recorded no new commit.
    """

    status: CommitStatus
    timestamp: str
    commit_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is not CommitStatus.FAILED

    @property
    def note(self) -> Optional[str]:
        if self.status is CommitStatus.NOTHING_TO_COMMIT:
            return "no_changes_needed"
        return None


class RepositoryDriver(Protocol):
    """Capabilities the synthesis engine needs from a version-control backend."""

    def is_initialized(self) -> bool: ...

    def ensure_initialized(self) -> None: ...

    def commit(self, moment: datetime) -> CommitOutcome: ...

    def find_root_commit(self) -> str: ...

    def reset_to_root(self) -> str: ...


def _date_env(date: str) -> Dict[str, str]:
    return {"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}


class GitDriver:
    """GitPython-backed :class:`RepositoryDriver` bound to one work tree."""

    def __init__(self, config: TimeMachineConfig | None = None):
        self.config = config or TimeMachineConfig()
        self.repo_path: Path = self.config.resolved_repo_path()
        self._repo: Repo | None = None

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            try:
                self._repo = Repo(self.repo_path)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise RepositoryError(f"Not a git repository: {self.repo_path}") from e
        return self._repo

    @property
    def marker_path(self) -> Path:
        return self.repo_path / self.config.marker_file

    def is_initialized(self) -> bool:
        """Return whether ``repo_path`` is the root of a git work tree.

        Parent directories are not searched, so a scratch directory nested
        inside another checkout is still reported as uninitialized.
        """

        try:
            Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False
        return True

    def ensure_initialized(self) -> None:
        """Create the repository and its backdated root commit when absent.

        Raises
        ------
        RepositoryError
            If neither the targeted nor the fallback bootstrap commit succeeds.
        """

        if self.is_initialized():
            return

        logger.info("No git repository at %s, bootstrapping history", self.repo_path)
        try:
            repo = Repo.init(self.repo_path)
        except GitCommandError as e:
            raise RepositoryError(f"git init failed: {e}") from e
        self._repo = repo

        env = _date_env(self.config.bootstrap_date)
        files = [f for f in self.config.bootstrap_files if f != self.config.marker_file]
        try:
            repo.git.add("--", *files)
            repo.git.commit("-m", self.config.bootstrap_message, env=env)
        except GitCommandError as e:
            logger.warning("Targeted bootstrap commit failed (%s), adding all files", e.stderr.strip())
            try:
                repo.git.add("-A")
                repo.git.rm("--cached", "--ignore-unmatch", "-q", "--", self.config.marker_file)
                repo.git.commit(
                    "--allow-empty", "-m", self.config.fallback_message, env=env
                )
            except GitCommandError as fallback_error:
                raise RepositoryError(
                    f"Could not create bootstrap commit: {fallback_error}"
                ) from fallback_error

        logger.info("Bootstrap commit created at %s", self.config.bootstrap_date)

    def commit(self, moment: datetime) -> CommitOutcome:
        """Append an activity line for ``moment`` and commit it backdated.

        Failures are reported through the returned outcome, never raised.
        """

        timestamp = format_timestamp(moment)
        try:
            self._append_activity(timestamp)
            repo = self.repo
            repo.git.add("-f", "--", self.config.marker_file)
            if not repo.is_dirty(index=True, working_tree=False, untracked_files=False):
                return CommitOutcome(CommitStatus.NOTHING_TO_COMMIT, timestamp)
            try:
                repo.git.commit("-m", self.config.commit_message, env=_date_env(timestamp))
            except GitCommandError as e:
                if NOTHING_TO_COMMIT in f"{e.stdout}{e.stderr}":
                    logger.info("Nothing to commit for %s", timestamp)
                    return CommitOutcome(CommitStatus.NOTHING_TO_COMMIT, timestamp)
                raise
            return CommitOutcome(
                CommitStatus.COMMITTED, timestamp, commit_id=repo.head.commit.hexsha
            )
        except (GitCommandError, RepositoryError, OSError) as e:
            logger.error("Commit failed for %s: %s", timestamp, e)
            return CommitOutcome(CommitStatus.FAILED, timestamp, error=str(e))

    def _append_activity(self, timestamp: str) -> None:
        marker = self.marker_path
        if not marker.exists():
            marker.write_text("", encoding="utf-8")
        with open(marker, "a", encoding="utf-8") as handle:
            handle.write(f"Activity log: {timestamp}\n")

    def find_root_commit(self) -> str:
        """Return the id of the single parentless commit reachable from HEAD.

        Raises
        ------
        RepositoryError
            If there is no root commit or more than one.
        """

        try:
            output = self.repo.git.rev_list("--max-parents=0", "HEAD")
        except GitCommandError as e:
            raise RepositoryError(f"Could not list root commits: {e}") from e

        roots = output.split()
        if not roots:
            raise RepositoryError("Repository has no root commit")
        if len(roots) > 1:
            raise RepositoryError(
                f"Repository has {len(roots)} root commits; refusing to pick one"
            )
        return roots[0]

    def reset_to_root(self) -> str:
        """Hard-reset to the root commit and delete the marker artifact."""

        root = self.find_root_commit()
        try:
            self.repo.git.reset("--hard", root)
        except GitCommandError as e:
            raise RepositoryError(f"git reset failed: {e}") from e

        try:
            self.marker_path.unlink(missing_ok=True)
        except OSError as e:
            raise RepositoryError(f"Could not remove {self.config.marker_file}: {e}") from e
        logger.info("Repository reset to root commit %s", root)
        return root
