# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release orchestrator.

The run is a fixed chain of stages:

  key_material -> keystore -> build -> signer_locator -> signing -> publication

Each stage is attempted in turn and its outcome recorded. The first Failure
ends the run; later stages are never attempted, and whatever earlier stages
produced (a built APK, a signed-but-unverified APK) stays on disk for
inspection. Sub-chains (keystore only, build only) reuse the same machinery.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from apkship.errors import (
    STAGE_BUILD,
    STAGE_KEY_MATERIAL,
    STAGE_KEYSTORE,
    STAGE_PUBLICATION,
    STAGE_SIGNER_LOCATOR,
    STAGE_SIGNING,
)
from apkship.logging.logger import get_logger
from apkship.pipeline.context import ReleaseContext, Toolchain
from apkship.pipeline.outcome import Failure, PipelineReport, StageOutcome, attempt
from apkship.stages.build import build_release_artifact
from apkship.stages.key_material import resolve_private_key
from apkship.stages.keystore import KeystoreResult, provision_keystore
from apkship.stages.publication import publish_artifact
from apkship.stages.signer_locator import locate_signer
from apkship.stages.signing import sign_and_verify
from apkship.utils.filesystem import format_size
from apkship.utils.hashing import compute_sha256

_logger: logging.Logger = get_logger(__name__)

StageFn = Callable[[ReleaseContext, Toolchain, Mapping[str, Any]], Any]


def _run_key_material(ctx: ReleaseContext, tools: Toolchain, done: Mapping[str, Any]) -> Path:
    return resolve_private_key(ctx.paths.private_key)


def _run_keystore(ctx: ReleaseContext, tools: Toolchain, done: Mapping[str, Any]) -> KeystoreResult:
    return provision_keystore(
        private_key=ctx.paths.private_key,
        keystore=ctx.paths.keystore,
        key_alias=ctx.config.signing.key_alias,
        credentials=ctx.require_credentials(),
        certificate_config=ctx.config.certificate,
        authority=tools.certificate_authority,
        converter=tools.keystore_converter,
    )


def _run_build(ctx: ReleaseContext, tools: Toolchain, done: Mapping[str, Any]) -> Path:
    return build_release_artifact(
        project_root=ctx.project_root,
        builder=tools.artifact_builder,
        unsigned_artifact=ctx.paths.unsigned_artifact,
        output_directories=ctx.paths.clean_directories,
        native_cache=ctx.paths.native_cache,
    )


def _run_signer_locator(ctx: ReleaseContext, tools: Toolchain, done: Mapping[str, Any]) -> Path:
    return locate_signer(ctx.env, ctx.config.signer.sdk_root_env, ctx.config.signer.binary)


def _run_signing(ctx: ReleaseContext, tools: Toolchain, done: Mapping[str, Any]) -> Path:
    keystore_result: KeystoreResult = done[STAGE_KEYSTORE]
    return sign_and_verify(
        signer=tools.signer_factory(done[STAGE_SIGNER_LOCATOR]),
        keystore=keystore_result.keystore,
        key_alias=ctx.config.signing.key_alias,
        credentials=ctx.require_credentials(),
        unsigned_artifact=done[STAGE_BUILD],
        signed_artifact=ctx.paths.signed_artifact,
    )


def _run_publication(ctx: ReleaseContext, tools: Toolchain, done: Mapping[str, Any]) -> Path:
    return publish_artifact(done[STAGE_SIGNING], ctx.paths.final_artifact)


RELEASE_STAGES: tuple[tuple[str, StageFn], ...] = (
    (STAGE_KEY_MATERIAL, _run_key_material),
    (STAGE_KEYSTORE, _run_keystore),
    (STAGE_BUILD, _run_build),
    (STAGE_SIGNER_LOCATOR, _run_signer_locator),
    (STAGE_SIGNING, _run_signing),
    (STAGE_PUBLICATION, _run_publication),
)
KEYSTORE_STAGES = RELEASE_STAGES[:2]
BUILD_STAGES = (RELEASE_STAGES[2],)
LOCATOR_STAGES = (RELEASE_STAGES[3],)


def run_pipeline(
    context: ReleaseContext,
    toolchain: Toolchain,
    stages: Sequence[tuple[str, StageFn]] = RELEASE_STAGES,
) -> PipelineReport:
    """
    Run `stages` in order, stopping at the first failure.

    Returns:
        PipelineReport with one outcome per attempted stage.

    Raises:
        ConfigValidationError: If a stage that needs the keystore passwords
            runs and they cannot be resolved. Nothing has been written by then.
    """
    outcomes: list[StageOutcome] = []
    done: dict[str, Any] = {}

    for name, fn in stages:
        _logger.debug("Stage started", extra={"stage": name})
        outcome = attempt(name, fn, context, toolchain, done)
        outcomes.append(outcome)
        if isinstance(outcome, Failure):
            _logger.error(
                "Stage failed",
                extra={
                    "stage": name,
                    "error_type": type(outcome.error).__name__,
                    "error": str(outcome.error),
                },
            )
            break
        done[name] = outcome.value

    return PipelineReport(outcomes=outcomes)


@dataclass(frozen=True)
class ReleaseSummary:
    """What the operator sees at the end of a successful run."""

    artifact: Path
    size_bytes: int
    size_human: str
    sha256: str
    verify_command: str


def summarize(report: PipelineReport) -> ReleaseSummary:
    """
    Describe the published APK of a successful release run.

    Raises:
        ValueError: If the report has no published artifact.
    """
    artifact = report.published_artifact
    signer_path = report.value_of(STAGE_SIGNER_LOCATOR)
    if artifact is None:
        raise ValueError("Report has no published artifact to summarize")

    size = artifact.stat().st_size
    return ReleaseSummary(
        artifact=artifact,
        size_bytes=size,
        size_human=format_size(size),
        sha256=compute_sha256(artifact),
        verify_command=f"{signer_path or 'apksigner'} verify {artifact}",
    )


def describe_plan(context: ReleaseContext, stages: Sequence[tuple[str, StageFn]] = RELEASE_STAGES) -> list[str]:
    """One line per stage saying what it would do. Used by --dry-run."""
    paths = context.paths
    build = context.config.build
    signer = context.config.signer
    descriptions = {
        STAGE_KEY_MATERIAL: f"check private key exists at {paths.private_key}",
        STAGE_KEYSTORE: (
            f"reuse existing keystore {paths.keystore}"
            if paths.keystore.exists()
            else f"create keystore {paths.keystore} (alias {context.config.signing.key_alias})"
        ),
        STAGE_BUILD: (
            f"clean {len(paths.clean_directories)} output directories, run "
            f"{build.gradle_wrapper} {build.task}, expect {paths.unsigned_artifact}"
        ),
        STAGE_SIGNER_LOCATOR: f"find {signer.binary} via ${signer.sdk_root_env}/build-tools or PATH",
        STAGE_SIGNING: f"sign into {paths.signed_artifact} and verify",
        STAGE_PUBLICATION: f"replace {paths.final_artifact}",
    }
    return [f"{name}: {descriptions[name]}" for name, _ in stages]
