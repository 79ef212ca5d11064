"""Prebuilt artifact declarations vs. tracked HEADs and the build server."""

from __future__ import annotations

from collections.abc import Collection, Mapping

import structlog

from lockstep.artifacts.errors import ArtifactFetchError
from lockstep.artifacts.models import PackageManifest
from lockstep.artifacts.resource import ArtifactResource
from lockstep.checks.models import CheckResult, Discrepancy, DiscrepancyKind
from lockstep.config.models import PendingPolicy

log = structlog.get_logger(__name__)


def check_artifacts(
    package_manifest: PackageManifest,
    tracked_revisions: Mapping[str, str],
    resource: ArtifactResource,
    *,
    integrator: str,
    pending_policy: PendingPolicy = "stop",
    excluded: Collection[str] = (),
) -> CheckResult:
    """Compare each prebuilt artifact against the image built at its repo's HEAD.

    An artifact the build server cannot serve is reported as not built yet.
    Under the ``stop`` policy no further artifacts are checked, since the rest
    usually wait on the same build; under ``continue`` only that artifact is
    skipped. Waiting on a build never requires an update by itself.
    """
    discrepancies: list[Discrepancy] = []
    update_required = False

    for artifact in package_manifest.artifacts:
        revision = tracked_revisions.get(artifact.repo)
        if revision is None:
            log.info("artifact.untracked", artifact=artifact.name, repo=artifact.repo)
            continue
        if artifact.repo in excluded:
            log.info("artifact.excluded", artifact=artifact.name, repo=artifact.repo)
            continue

        try:
            digest = resource.fetch_digest(artifact.repo, revision, artifact.name)
        except ArtifactFetchError as e:
            log.info("artifact.pending", artifact=artifact.name, url=e.url, reason=e.reason)
            discrepancies.append(
                Discrepancy(
                    kind=DiscrepancyKind.ARTIFACT_NOT_YET_BUILT,
                    name=artifact.name,
                    old=artifact.commit,
                    new=revision,
                    subject=integrator,
                    note=e.reason,
                )
            )
            if pending_policy == "stop":
                break
            continue

        if digest != artifact.sha256:
            discrepancies.append(
                Discrepancy(
                    kind=DiscrepancyKind.ARTIFACT_HASH_MISMATCH,
                    name=artifact.name,
                    old=artifact.sha256,
                    new=digest,
                    subject=integrator,
                )
            )
            update_required = True

        if artifact.commit != revision:
            discrepancies.append(
                Discrepancy(
                    kind=DiscrepancyKind.ARTIFACT_COMMIT_STALE,
                    name=artifact.name,
                    old=artifact.commit,
                    new=revision,
                    subject=integrator,
                )
            )
            update_required = True

    return CheckResult(discrepancies=tuple(discrepancies), update_required=update_required)
