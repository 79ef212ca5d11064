"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides fixtures for building side-by-side checkouts.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pygit2
import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local lockstep package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of lockstep modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("lockstep"):
        del sys.modules[module_name]


GitRepoFactory = Callable[..., str]


@pytest.fixture
def make_git_repo() -> GitRepoFactory:
    """Return a factory that turns a directory into a git repo with one commit.

    The factory returns the HEAD commit sha.
    """

    def _make(path: Path, branch: str = "main", message: str = "Initial commit") -> str:
        path.mkdir(parents=True, exist_ok=True)
        repo = pygit2.init_repository(str(path), initial_head=branch)
        repo.config["user.name"] = "Test User"
        repo.config["user.email"] = "test@example.com"

        if not any(p.name != ".git" for p in path.iterdir()):
            (path / "README.md").write_text("# Test Repo\n")
        repo.index.add_all()
        repo.index.write()
        tree = repo.index.write_tree()
        sig = pygit2.Signature("Test User", "test@example.com")
        oid = repo.create_commit(f"refs/heads/{branch}", sig, sig, message, tree, [])
        repo.set_head(f"refs/heads/{branch}")
        return str(oid)

    return _make


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Write ``content`` to ``path``, creating parent directories."""

    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
