"""Runs every check in dependency order against checkouts in one directory.

The order matters: a downstream repository pinning a stale upstream
revision is only worth reporting once the upstream repositories agree
with each other. Any stage of revision checks that requires an update ends
the run; fix those, then re-run.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import httpx
import structlog

from lockstep.artifacts.parser import parse_package_manifest
from lockstep.artifacts.resource import ArtifactResource, HttpArtifactResource
from lockstep.checks.artifacts import check_artifacts
from lockstep.checks.lockfile import check_lockfile
from lockstep.checks.models import CheckResult, Discrepancy
from lockstep.checks.report import Reporter
from lockstep.checks.revisions import check_revisions
from lockstep.config.models import LockstepConfig, RepositoryConfig
from lockstep.core.errors import CheckoutError
from lockstep.git.errors import GitError
from lockstep.git.models import TrackedCheckout, tracked_revisions
from lockstep.git.ops import GitRevisionSource, RevisionSource
from lockstep.lockfile.parser import parse_lockfile
from lockstep.manifest.models import DependencyEdge
from lockstep.manifest.parser import parse_manifest
from lockstep.manifest.walker import ManifestWalker

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    checkouts: tuple[TrackedCheckout, ...]
    discrepancies: tuple[Discrepancy, ...] = ()
    update_required: bool = False
    stopped_at_stage: int | None = None


class LockstepRunner:
    """Collects HEADs once, then runs revision, lockfile and artifact checks.

    The revision source and artifact resource are injectable so that runs
    can be driven without git checkouts or network access.
    """

    def __init__(
        self,
        config: LockstepConfig,
        workdir: Path,
        *,
        revision_source: RevisionSource | None = None,
        artifact_resource: ArtifactResource | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self._config = config
        self._workdir = workdir
        self._revision_source = revision_source or GitRevisionSource()
        self._artifact_resource = artifact_resource
        self._reporter = reporter or Reporter(base=workdir)
        self._edges: dict[str, frozenset[DependencyEdge]] = {}

    # =========================================================================
    # Checkouts
    # =========================================================================

    def _checkout_dir(self, repo: RepositoryConfig) -> Path:
        return self._workdir / repo.checkout_dir

    def collect_checkouts(self) -> tuple[TrackedCheckout, ...]:
        """Current revision of every tracked checkout.

        Raises:
            CheckoutError: A checkout is missing or its HEAD cannot be read.
        """
        for repo in self._config.repositories:
            path = self._checkout_dir(repo)
            if not path.is_dir():
                raise CheckoutError.not_found(repo.name, str(path))

        checkouts: list[TrackedCheckout] = []
        for repo in self._config.repositories:
            try:
                checkout = self._revision_source.checkout(repo.name, self._checkout_dir(repo))
            except GitError as e:
                raise CheckoutError.head_unreadable(repo.name, str(e)) from e
            checkouts.append(checkout)
        return tuple(checkouts)

    # =========================================================================
    # Checks
    # =========================================================================

    def _manifest_edges(self, repo: RepositoryConfig) -> frozenset[DependencyEdge]:
        if repo.name not in self._edges:
            root_dir = self._checkout_dir(repo)
            root_manifest = parse_manifest(root_dir / repo.manifest)
            walker = ManifestWalker(manifest_name=repo.manifest)
            self._edges[repo.name] = walker.walk(root_dir, root_manifest)
        return self._edges[repo.name]

    def _run_stages(self, revisions: Mapping[str, str]) -> tuple[CheckResult, int | None]:
        results: list[CheckResult] = []
        for index, stage in enumerate(self._config.stages):
            stage_results = []
            for check in stage:
                with structlog.contextvars.bound_contextvars(
                    repository=check.dependent, dependency=check.dependency
                ):
                    edges = self._manifest_edges(self._config.repository(check.dependent))
                    result = check_revisions(edges, check.dependency, revisions[check.dependency])
                    log.debug(
                        "revisions.checked", edges=len(edges), found=len(result.discrepancies)
                    )
                self._reporter.emit(result.discrepancies)
                stage_results.append(result)

            results.extend(stage_results)
            if CheckResult.combine(stage_results).update_required:
                log.info("run.stopped", stage=index, reason="upstream revisions need updating")
                return CheckResult.combine(results), index
        return CheckResult.combine(results), None

    def _run_lockfiles(self, revisions: Mapping[str, str]) -> CheckResult:
        discrepancies: list[Discrepancy] = []
        for repo in self._config.repositories:
            if repo.lockfile is None:
                continue
            root_dir = self._checkout_dir(repo)
            lockfile_path = root_dir / repo.lockfile
            with structlog.contextvars.bound_contextvars(repository=repo.name):
                if not lockfile_path.exists():
                    log.debug("lockfile.absent", path=str(lockfile_path))
                    continue
                lockfile = parse_lockfile(lockfile_path)
                walker = ManifestWalker(manifest_name=repo.manifest)
                names = walker.collect_direct_dependency_names(root_dir)
                report = check_lockfile(lockfile, names, revisions)
            self._reporter.emit(report.discrepancies)
            discrepancies.extend(report.discrepancies)
        # stale lockfile pins are informational and never gate the run
        return CheckResult(discrepancies=tuple(discrepancies))

    def _run_artifacts(self, revisions: Mapping[str, str]) -> CheckResult:
        settings = self._config.artifacts
        integrator = self._config.repository(settings.integrator)
        manifest_path = self._checkout_dir(integrator) / settings.package_manifest
        manifest = parse_package_manifest(manifest_path)

        def run(resource: ArtifactResource) -> CheckResult:
            return check_artifacts(
                manifest,
                revisions,
                resource,
                integrator=integrator.name,
                pending_policy=settings.pending_policy,
                excluded=settings.exclude,
            )

        if self._artifact_resource is not None:
            result = run(self._artifact_resource)
        else:
            with httpx.Client(timeout=settings.timeout_sec, follow_redirects=True) as client:
                result = run(HttpArtifactResource(client, settings.url_template))
        self._reporter.emit(result.discrepancies)
        return result

    def run(self) -> RunResult:
        """Run every check. Discrepancies are reported, never raised.

        Raises:
            CheckoutError: A tracked checkout is missing or unreadable.
            ManifestError: A root manifest, lockfile or package manifest is unparseable.
            SourceConflictError: A lockfile resolves one source to two revisions.
        """
        checkouts = self.collect_checkouts()
        revisions = tracked_revisions(checkouts)

        staged, stopped_at = self._run_stages(revisions)
        if stopped_at is not None:
            return RunResult(
                checkouts=checkouts,
                discrepancies=staged.discrepancies,
                update_required=True,
                stopped_at_stage=stopped_at,
            )

        results = [staged, self._run_lockfiles(revisions)]
        if self._config.artifacts.enabled:
            results.append(self._run_artifacts(revisions))
        combined = CheckResult.combine(results)
        return RunResult(
            checkouts=checkouts,
            discrepancies=combined.discrepancies,
            update_required=combined.update_required,
        )
