"""Fixtures for CLI tests: real git checkouts side by side."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

CRUCIBLE = "https://github.com/oxidecomputer/crucible"
PROPOLIS = "https://github.com/oxidecomputer/propolis"


@pytest.fixture
def checkouts(
    tmp_path: Path,
    make_git_repo: Callable[..., str],
    write_file: Callable[[Path, str], Path],
) -> dict[str, str]:
    """crucible, propolis and omicron committed in dependency order.

    Each downstream repository pins its upstreams at their HEAD, so the
    checkouts start out consistent. Returns the HEAD sha of each.
    """
    heads: dict[str, str] = {}

    write_file(tmp_path / "crucible" / "Cargo.toml", '[package]\nname = "crucible"\n')
    heads["crucible"] = make_git_repo(tmp_path / "crucible")

    write_file(
        tmp_path / "propolis" / "Cargo.toml",
        '[package]\nname = "propolis-server"\n[dependencies]\n'
        f'crucible = {{ git = "{CRUCIBLE}", rev = "{heads["crucible"]}" }}\n',
    )
    heads["propolis"] = make_git_repo(tmp_path / "propolis")

    write_file(
        tmp_path / "omicron" / "Cargo.toml",
        '[workspace]\nmembers = ["sled-agent"]\n[workspace.dependencies]\n'
        f'propolis-client = {{ git = "{PROPOLIS}", rev = "{heads["propolis"]}" }}\n',
    )
    write_file(
        tmp_path / "omicron" / "sled-agent" / "Cargo.toml",
        '[package]\nname = "omicron-sled-agent"\n[dependencies]\n'
        f'crucible-agent-client = {{ git = "{CRUCIBLE}", rev = "{heads["crucible"]}" }}\n',
    )
    heads["omicron"] = make_git_repo(tmp_path / "omicron")
    return heads
