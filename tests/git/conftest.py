"""Test fixtures for git module."""

from __future__ import annotations

from pathlib import Path

import pygit2
import pytest


@pytest.fixture
def temp_repo(tmp_path: Path) -> pygit2.Repository:
    """Create a temporary git repository with initial commit."""
    repo_path = tmp_path / "crucible"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    (repo_path / "README.md").write_text("# Test Repo\n")
    repo.index.add("README.md")
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    repo.create_commit("refs/heads/main", sig, sig, "Initial commit", tree, [])
    repo.set_head("refs/heads/main")
    return repo

