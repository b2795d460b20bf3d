from __future__ import annotations

import os
import shutil
from datetime import datetime
from typing import List

import pytest

from timemachine.config import TimeMachineConfig
from timemachine.dates import format_timestamp
from timemachine.git.driver import CommitOutcome, CommitStatus

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


class FakeDriver:
    """In-memory stand-in for :class:`GitDriver`."""

    def __init__(self, initialized: bool = False, fail_on: set[str] | None = None):
        self.initialized = initialized
        self.init_calls = 0
        self.committed: List[datetime] = []
        self.fail_on = fail_on or set()
        self.noop_on: set[str] = set()
        self.root = "0" * 40

    def is_initialized(self) -> bool:
        return self.initialized

    def ensure_initialized(self) -> None:
        self.init_calls += 1
        self.initialized = True

    def commit(self, moment: datetime) -> CommitOutcome:
        timestamp = format_timestamp(moment)
        day = moment.date().isoformat()
        if day in self.fail_on:
            return CommitOutcome(CommitStatus.FAILED, timestamp, error="simulated failure")
        self.committed.append(moment)
        if day in self.noop_on:
            return CommitOutcome(CommitStatus.NOTHING_TO_COMMIT, timestamp)
        return CommitOutcome(CommitStatus.COMMITTED, timestamp, commit_id="f" * 40)

    def find_root_commit(self) -> str:
        return self.root

    def reset_to_root(self) -> str:
        self.committed.clear()
        return self.root


@pytest.fixture(autouse=True)
def git_identity(monkeypatch) -> None:
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)


@pytest.fixture
def config(tmp_path) -> TimeMachineConfig:
    return TimeMachineConfig(repo_path=tmp_path / "repo")


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()
