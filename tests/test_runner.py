"""Tests for the check runner."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from lockstep.artifacts.errors import ArtifactNotFoundError
from lockstep.checks.report import Reporter
from lockstep.config.models import ArtifactsConfig, LockstepConfig, RepositoryConfig
from lockstep.core.errors import CheckoutError, ErrorCode, ManifestError, SourceConflictError
from lockstep.git.errors import NotARepositoryError
from lockstep.git.models import TrackedCheckout
from lockstep.runner import LockstepRunner

WriteFile = Callable[[Path, str], Path]

CRUCIBLE = "https://github.com/oxidecomputer/crucible"
PROPOLIS = "https://github.com/oxidecomputer/propolis"

HEADS = {"crucible": "abc123", "propolis": "ppp", "omicron": "ooo"}


class FakeRevisionSource:
    def __init__(self, revisions: dict[str, str]) -> None:
        self._revisions = revisions

    def checkout(self, name: str, path: Path) -> TrackedCheckout:
        if name not in self._revisions:
            raise NotARepositoryError(str(path))
        return TrackedCheckout(name=name, root=path, revision=self._revisions[name], branch="main")


class FakeResource:
    def __init__(self, digests: dict[str, str]) -> None:
        self._digests = digests
        self.requests: list[tuple[str, str, str]] = []

    def fetch_digest(self, repo: str, revision: str, artifact: str) -> str:
        self.requests.append((repo, revision, artifact))
        if artifact not in self._digests:
            raise ArtifactNotFoundError(f"https://b/{repo}/{revision}/{artifact}")
        return self._digests[artifact]


@pytest.fixture
def workdir(tmp_path: Path, write_file: WriteFile) -> Path:
    """Three checkouts that agree on every pinned revision."""
    write_file(tmp_path / "crucible" / "Cargo.toml", '[package]\nname = "crucible"\n')
    write_file(
        tmp_path / "propolis" / "Cargo.toml",
        '[package]\nname = "propolis-server"\n[dependencies]\n'
        f'crucible = {{ git = "{CRUCIBLE}", rev = "abc123" }}\n',
    )
    write_file(
        tmp_path / "omicron" / "Cargo.toml",
        '[workspace]\nmembers = ["nexus"]\n[workspace.dependencies]\n'
        f'crucible-client-types = {{ git = "{CRUCIBLE}", branch = "main" }}\n'
        f'propolis-client = {{ git = "{PROPOLIS}", rev = "ppp" }}\n',
    )
    write_file(
        tmp_path / "omicron" / "nexus" / "Cargo.toml",
        '[package]\nname = "omicron-nexus"\n[dependencies]\n'
        f'crucible-agent-client = {{ git = "{CRUCIBLE}", rev = "abc123" }}\n'
        "propolis-client = { workspace = true }\n",
    )
    write_file(
        tmp_path / "omicron" / "package-manifest.toml",
        "[package.crucible]\n"
        'service_name = "crucible"\n'
        'source.type = "prebuilt"\n'
        'source.repo = "crucible"\n'
        'source.commit = "abc123"\n'
        'source.sha256 = "aaaa"\n'
        'output.type = "zone"\n',
    )
    return tmp_path


def _runner(
    workdir: Path,
    config: LockstepConfig | None = None,
    revisions: dict[str, str] = HEADS,
    digests: dict[str, str] | None = None,
) -> tuple[LockstepRunner, io.StringIO, FakeResource]:
    out = io.StringIO()
    resource = FakeResource({"crucible": "aaaa"} if digests is None else digests)
    runner = LockstepRunner(
        config or LockstepConfig(),
        workdir,
        revision_source=FakeRevisionSource(revisions),
        artifact_resource=resource,
        reporter=Reporter(base=workdir, file=out),
    )
    return runner, out, resource


class TestCollectCheckouts:
    def test_reads_every_checkout_in_order(self, workdir: Path) -> None:
        runner, _, _ = _runner(workdir)
        checkouts = runner.collect_checkouts()
        assert [(c.name, c.revision) for c in checkouts] == list(HEADS.items())
        assert checkouts[0].root == workdir / "crucible"

    def test_missing_checkout_names_the_repository(self, tmp_path: Path) -> None:
        (tmp_path / "crucible").mkdir()
        (tmp_path / "omicron").mkdir()
        runner, _, _ = _runner(tmp_path)

        with pytest.raises(CheckoutError) as exc_info:
            runner.collect_checkouts()

        assert exc_info.value.code is ErrorCode.CHECKOUT_NOT_FOUND
        assert "cannot find your local checkout of propolis" in exc_info.value.message

    def test_unreadable_head(self, workdir: Path) -> None:
        runner, _, _ = _runner(workdir, revisions={"crucible": "a", "propolis": "b"})
        with pytest.raises(CheckoutError) as exc_info:
            runner.collect_checkouts()
        assert exc_info.value.code is ErrorCode.CHECKOUT_HEAD_UNREADABLE

    def test_custom_checkout_path(self, tmp_path: Path) -> None:
        (tmp_path / "src" / "crucible-main").mkdir(parents=True)
        config = LockstepConfig(
            repositories=[RepositoryConfig(name="crucible", path="src/crucible-main")],
            stages=[],
            artifacts=ArtifactsConfig(enabled=False),
        )
        runner, _, _ = _runner(tmp_path, config=config)
        (checkout,) = runner.collect_checkouts()
        assert checkout.root == tmp_path / "src" / "crucible-main"


class TestRun:
    def test_consistent_checkouts_report_nothing(self, workdir: Path) -> None:
        runner, out, resource = _runner(workdir)

        result = runner.run()

        assert result.discrepancies == ()
        assert not result.update_required
        assert result.stopped_at_stage is None
        assert out.getvalue() == ""
        assert resource.requests == [("crucible", "abc123", "crucible")]

    def test_upstream_drift_stops_the_run(self, workdir: Path) -> None:
        runner, out, resource = _runner(workdir, revisions={**HEADS, "crucible": "new"})

        result = runner.run()

        assert result.update_required
        assert result.stopped_at_stage == 0
        # omicron also pins crucible, but is not checked until propolis is fixed
        assert out.getvalue().splitlines() == [
            "update ./propolis/Cargo.toml crucible rev from abc123 to new"
        ]
        assert resource.requests == []

    def test_downstream_drift_reports_every_file(self, workdir: Path) -> None:
        runner, out, _ = _runner(workdir, revisions={**HEADS, "propolis": "p2"})

        result = runner.run()

        assert result.stopped_at_stage == 1
        assert out.getvalue().splitlines() == [
            "update ./omicron/Cargo.toml propolis-client rev from ppp to p2"
        ]

    def test_lockfile_and_artifact_findings(self, workdir: Path, write_file: WriteFile) -> None:
        write_file(
            workdir / "omicron" / "Cargo.lock",
            "version = 3\n\n[[package]]\n"
            'name = "crucible-client-types"\nversion = "0.1.0"\n'
            f'source = "git+{CRUCIBLE}?branch=main#old"\n',
        )
        runner, out, _ = _runner(workdir, digests={"crucible": "bbbb"})

        result = runner.run()

        assert out.getvalue().splitlines() == [
            "update ./omicron/Cargo.lock crucible-client-types precise rev from old to abc123",
            "update omicron package manifest crucible sha256 from aaaa to bbbb",
        ]
        assert result.update_required
        assert out.getvalue().splitlines() == [d.render(workdir) for d in result.discrepancies]

    def test_stale_lockfile_alone_does_not_require_update(
        self, workdir: Path, write_file: WriteFile
    ) -> None:
        write_file(
            workdir / "omicron" / "Cargo.lock",
            "version = 3\n\n[[package]]\n"
            'name = "crucible-client-types"\nversion = "0.1.0"\n'
            f'source = "git+{CRUCIBLE}?branch=main#old"\n',
        )
        runner, _, _ = _runner(workdir)

        result = runner.run()

        assert len(result.discrepancies) == 1
        assert not result.update_required

    def test_pending_artifact(self, workdir: Path) -> None:
        runner, out, _ = _runner(workdir, digests={})

        result = runner.run()

        assert out.getvalue().splitlines() == [
            "wait for crucible image for abc123 to be built (404 Not Found)"
        ]
        assert not result.update_required

    def test_artifacts_disabled(self, workdir: Path) -> None:
        config = LockstepConfig(artifacts=ArtifactsConfig(enabled=False))
        runner, _, resource = _runner(workdir, config=config, digests={})
        assert runner.run().discrepancies == ()
        assert resource.requests == []

    def test_lockfile_conflict_is_fatal(self, workdir: Path, write_file: WriteFile) -> None:
        write_file(
            workdir / "omicron" / "Cargo.lock",
            "version = 3\n\n"
            '[[package]]\nname = "crucible-client-types"\nversion = "0.1.0"\n'
            f'source = "git+{CRUCIBLE}?branch=main#aaa"\n\n'
            '[[package]]\nname = "crucible-common"\nversion = "0.1.0"\n'
            f'source = "git+{CRUCIBLE}?branch=main#bbb"\n',
        )
        runner, _, _ = _runner(workdir)
        with pytest.raises(SourceConflictError):
            runner.run()

    def test_unparseable_root_manifest_is_fatal(
        self, workdir: Path, write_file: WriteFile
    ) -> None:
        write_file(workdir / "propolis" / "Cargo.toml", "[package\n")
        runner, _, _ = _runner(workdir)
        with pytest.raises(ManifestError):
            runner.run()

    def test_missing_package_manifest_is_fatal(self, workdir: Path) -> None:
        (workdir / "omicron" / "package-manifest.toml").unlink()
        runner, _, _ = _runner(workdir)
        with pytest.raises(ManifestError) as exc_info:
            runner.run()
        assert exc_info.value.code is ErrorCode.PACKAGE_MANIFEST_PARSE_ERROR
