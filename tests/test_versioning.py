"""
Tests for git synchronization against temporary repositories.
"""

import shutil
from pathlib import Path

import git
import pytest

from gtdnota.versioning import VersionManager

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def init_repo(path: Path):
    repo = git.Repo.init(path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
    return repo


def test_outside_repository_is_a_noop(tmp_path):
    manager = VersionManager(tmp_path / "gtd.toml")

    assert not manager.is_git_managed()
    assert manager.pull()
    assert manager.commit(tmp_path / "gtd.toml", "message")
    assert manager.push()
    assert manager.sync(tmp_path / "gtd.toml", "message")
    assert manager.get_commit_history() == []


def test_repository_is_found_from_subdirectory(tmp_path):
    init_repo(tmp_path)
    (tmp_path / "data").mkdir()

    manager = VersionManager(tmp_path / "data" / "gtd.toml")

    assert manager.is_git_managed()
    assert isinstance(manager.repo, git.Repo)


def test_commit_file(tmp_path):
    init_repo(tmp_path)
    doc = tmp_path / "gtd.toml"
    doc.write_text("format_version = 3\n", encoding="utf-8")
    manager = VersionManager(doc)

    assert manager.commit(doc, "Add item a")

    history = manager.get_commit_history()
    assert len(history) == 1
    assert history[0]["message"] == "Add item a"
    assert "Test User" in history[0]["author"]


def test_commit_without_changes_is_a_noop(tmp_path):
    init_repo(tmp_path)
    doc = tmp_path / "gtd.toml"
    doc.write_text("format_version = 3\n", encoding="utf-8")
    manager = VersionManager(doc)

    assert manager.commit(doc, "first")
    assert manager.commit(doc, "second")

    assert len(manager.get_commit_history()) == 1


def test_commit_only_stages_the_document(tmp_path):
    repo = init_repo(tmp_path)
    doc = tmp_path / "gtd.toml"
    doc.write_text("format_version = 3\n", encoding="utf-8")
    (tmp_path / "other.txt").write_text("unrelated", encoding="utf-8")

    assert VersionManager(doc).commit(doc, "Add document")

    assert "other.txt" in repo.untracked_files


def test_commit_outside_working_tree_fails(tmp_path):
    init_repo(tmp_path / "repo")
    manager = VersionManager(tmp_path / "repo" / "gtd.toml")
    outside = tmp_path / "elsewhere.toml"
    outside.write_text("", encoding="utf-8")

    assert not manager.commit(outside, "message")


def test_sync_without_remote_fails(tmp_path):
    init_repo(tmp_path)
    doc = tmp_path / "gtd.toml"
    doc.write_text("format_version = 3\n", encoding="utf-8")

    assert not VersionManager(doc).sync(doc, "message")


def test_sync_pulls_commits_and_pushes(tmp_path):
    remote_path = tmp_path / "remote.git"
    git.Repo.init(remote_path, bare=True)

    work = tmp_path / "work"
    repo = init_repo(work)
    doc = work / "gtd.toml"
    doc.write_text("format_version = 3\n", encoding="utf-8")
    repo.index.add(["gtd.toml"])
    repo.index.commit("Initial document")
    origin = repo.create_remote("origin", str(remote_path))
    branch = repo.active_branch.name
    origin.push(refspec=f"refs/heads/{branch}")

    doc.write_text("format_version = 3\ntask_counter = 1\n", encoding="utf-8")
    manager = VersionManager(doc)

    assert manager.sync(doc, "Add item #1")

    remote_repo = git.Repo(remote_path)
    assert remote_repo.commit(branch).message.strip() == "Add item #1"


def test_author_falls_back_to_configured_identity(tmp_path):
    repo = git.Repo.init(tmp_path)
    doc = tmp_path / "gtd.toml"
    doc.write_text("format_version = 3\n", encoding="utf-8")
    manager = VersionManager(doc, author_name="Fallback Name", author_email="fallback@example.com")

    actor = manager._actor()
    assert isinstance(actor, git.Actor)
    reader = repo.config_reader()
    expected_name = reader.get_value("user", "name", default="Fallback Name")

    assert actor.name == expected_name


def test_configured_remote_is_resolved(tmp_path):
    repo = init_repo(tmp_path)
    repo.create_remote("backup", str(tmp_path / "elsewhere.git"))
    manager = VersionManager(tmp_path / "gtd.toml", remote="backup")

    assert isinstance(manager._remote(), git.Remote)
    assert manager._remote().name == "backup"
