"""Driver tests against a real git executable in a scratch directory."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from conftest import requires_git
from git import Repo

from timemachine.errors import RepositoryError
from timemachine.git.driver import CommitStatus, GitDriver

pytestmark = requires_git

BOOTSTRAP_EPOCH = 1612173600  # 2021-02-01T10:00:00Z


def test_is_initialized_false_for_missing_directory(config) -> None:
    assert not GitDriver(config).is_initialized()


def test_bootstrap_empty_directory_uses_fallback(config) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()

    repo = Repo(config.repo_path)
    commits = list(repo.iter_commits())
    assert len(commits) == 1
    assert commits[0].message.strip() == config.fallback_message
    assert commits[0].authored_date == BOOTSTRAP_EPOCH
    assert commits[0].committed_date == BOOTSTRAP_EPOCH


def test_bootstrap_adds_named_files_without_marker(config) -> None:
    config.repo_path.mkdir()
    for name in config.bootstrap_files:
        (config.repo_path / name).write_text(f"# {name}\n", encoding="utf-8")
    (config.repo_path / config.marker_file).write_text("stale\n", encoding="utf-8")

    GitDriver(config).ensure_initialized()

    head = Repo(config.repo_path).head.commit
    assert head.message.strip() == config.bootstrap_message
    tracked = {item.path for item in head.tree.traverse()}
    assert set(config.bootstrap_files) <= tracked
    assert config.marker_file not in tracked


def test_ensure_initialized_is_idempotent(config) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    driver.ensure_initialized()
    assert len(list(Repo(config.repo_path).iter_commits())) == 1


def test_commit_backdates_author_and_committer(config) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    moment = datetime(2024, 1, 1, 14, 5)

    outcome = driver.commit(moment)

    assert outcome.status is CommitStatus.COMMITTED
    assert outcome.succeeded
    head = Repo(config.repo_path).head.commit
    assert head.hexsha == outcome.commit_id
    assert head.authored_date == int(moment.timestamp())
    assert head.committed_date == int(moment.timestamp())
    marker = config.marker_path().read_text(encoding="utf-8")
    assert marker == f"Activity log: {outcome.timestamp}\n"


def test_commit_force_adds_ignored_marker(config) -> None:
    config.repo_path.mkdir()
    (config.repo_path / ".gitignore").write_text(f"{config.marker_file}\n", encoding="utf-8")
    driver = GitDriver(config)
    driver.ensure_initialized()

    first = driver.commit(datetime(2024, 1, 1, 9, 0))
    second = driver.commit(datetime(2024, 1, 1, 9, 0))

    assert first.status is CommitStatus.COMMITTED
    assert second.status is CommitStatus.COMMITTED
    assert len(list(Repo(config.repo_path).iter_commits())) == 3


def test_commit_failure_is_reported_not_raised(config) -> None:
    outcome = GitDriver(config).commit(datetime(2024, 1, 1, 9, 0))
    assert outcome.status is CommitStatus.FAILED
    assert outcome.error


def test_reset_to_root_discards_synthesized_commits(config) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    root = driver.find_root_commit()
    for hour in (9, 10, 11):
        driver.commit(datetime(2024, 1, 2, hour, 0))

    assert driver.reset_to_root() == root
    assert [c.hexsha for c in Repo(config.repo_path).iter_commits()] == [root]
    assert not config.marker_path().exists()


def test_multiple_roots_fail_loudly(config) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    repo = Repo(config.repo_path)
    branch = repo.active_branch.name
    repo.git.checkout("--orphan", "detached-root")
    repo.git.commit("--allow-empty", "-m", "second root")
    repo.git.checkout(branch)
    repo.git.merge("--allow-unrelated-histories", "-m", "join roots", "detached-root")

    with pytest.raises(RepositoryError, match="root commits"):
        driver.find_root_commit()


def test_unchanged_marker_is_nothing_to_commit(config, monkeypatch) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    driver.commit(datetime(2024, 1, 1, 9, 0))
    monkeypatch.setattr(driver, "_append_activity", lambda timestamp: None)

    outcome = driver.commit(datetime(2024, 1, 1, 10, 0))

    assert outcome.status is CommitStatus.NOTHING_TO_COMMIT
    assert outcome.succeeded
    assert outcome.note == "no_changes_needed"
    assert len(list(Repo(config.repo_path).iter_commits())) == 2


def test_git_nothing_to_commit_reply_is_not_a_failure(config, monkeypatch) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    driver.commit(datetime(2024, 1, 1, 9, 0))
    monkeypatch.setattr(driver, "_append_activity", lambda timestamp: None)
    monkeypatch.setattr(driver.repo, "is_dirty", lambda **kwargs: True)

    outcome = driver.commit(datetime(2024, 1, 1, 10, 0))

    assert outcome.status is CommitStatus.NOTHING_TO_COMMIT
    assert len(list(Repo(config.repo_path).iter_commits())) == 2


def test_reset_reports_marker_removal_failure(config, monkeypatch) -> None:
    driver = GitDriver(config)
    driver.ensure_initialized()
    driver.commit(datetime(2024, 1, 2, 9, 0))

    def refuse(self, missing_ok=False):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(Path, "unlink", refuse)

    with pytest.raises(RepositoryError, match="Could not remove data.txt"):
        driver.reset_to_root()
