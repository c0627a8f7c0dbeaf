# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the apkship CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Handlers share one setup step (config, logging, run context) and then
hand off to the pipeline or a single stage.

Pipeline failures are expected outcomes and exit with STAGE_FAILURE after one
error line naming the stage. Anything else that escapes is unexpected and is
logged with its traceback before exiting with RUNTIME_ERROR.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from apkship.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, STAGE_FAILURE, SUCCESS
from apkship.config.exceptions import ConfigError
from apkship.config.loader import default_config, load_config
from apkship.errors import PipelineError
from apkship.logging.logger import configure_logging, get_logger
from apkship.pipeline.context import ReleaseContext, build_context, default_toolchain
from apkship.pipeline.outcome import PipelineReport
from apkship.pipeline.runner import (
    BUILD_STAGES,
    KEYSTORE_STAGES,
    LOCATOR_STAGES,
    RELEASE_STAGES,
    StageFn,
    describe_plan,
    run_pipeline,
    summarize,
)
from apkship.runtime.preflight import validate_environment
from apkship.stages.signer_locator import locate_signer
from apkship.stages.signing import verify_artifact
from apkship.utils.paths import resolve_project_root

_BANNER = "=" * 42


def _load_context(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[ReleaseContext], logging.Logger]:
    """
    The shared setup every command needs: config, logging, run context.

    Returns a tuple of (exit_code, context, logger). If exit_code is not
    SUCCESS, the caller should return it immediately.
    """
    logger = get_logger(f"apkship.cli.{command_name}", log_level=args.log_level or "INFO")

    try:
        config = load_config(Path(args.config)) if args.config is not None else default_config()
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, logger

    try:
        project_root = resolve_project_root(args.project_root)
    except FileNotFoundError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, logger

    context = build_context(config, project_root)
    global_config = config.global_config
    configure_logging(
        log_level=args.log_level or global_config.log_level,
        log_format=global_config.log_format,
        log_file=context.paths.log_file,
    )

    logger.debug(
        "Context ready",
        extra={"command": command_name, "project_root": str(project_root), "config": args.config},
    )
    return SUCCESS, context, logger


def _report_failure(report: PipelineReport, logger: logging.Logger) -> int:
    failure = report.failure
    if failure is None:
        return SUCCESS
    extra: dict[str, object] = {"stage": failure.stage}
    if failure.error.path is not None:
        extra["path"] = str(failure.error.path)
    logger.error(f"ERROR: {failure.error}", extra=extra)
    return STAGE_FAILURE


def _run_stages(
    args: argparse.Namespace,
    command_name: str,
    stages: Sequence[tuple[str, StageFn]],
) -> int:
    """Shared body of the single-purpose commands (keystore, build)."""
    exit_code, context, logger = _load_context(args, command_name)
    if exit_code != SUCCESS or context is None:
        return exit_code

    try:
        if args.dry_run:
            for line in describe_plan(context, stages):
                logger.info(f"Dry run, would {line}")
            return SUCCESS

        report = run_pipeline(context, default_toolchain(context), stages)
        return _report_failure(report, logger)

    except ConfigError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR
    except Exception as err:
        logger.error("Runtime error", extra={"command": command_name, "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_release(args: argparse.Namespace) -> int:
    """Run the whole chain: key, keystore, build, locate signer, sign + verify, publish."""
    exit_code, context, logger = _load_context(args, "release")
    if exit_code != SUCCESS or context is None:
        return exit_code

    try:
        logger.info(_BANNER)
        logger.info("Building and Signing APK")
        logger.info(_BANNER)

        if args.dry_run:
            for line in describe_plan(context, RELEASE_STAGES):
                logger.info(f"Dry run, would {line}")
            return SUCCESS

        report = run_pipeline(context, default_toolchain(context), RELEASE_STAGES)
        if not report.succeeded:
            return _report_failure(report, logger)

        summary = summarize(report)
        logger.info(_BANNER)
        logger.info("Build and Sign Complete!")
        logger.info(_BANNER)
        logger.info(f"Signed APK: {summary.artifact}")
        logger.info(f"APK Size: {summary.size_human}")
        logger.info(f"SHA-256: {summary.sha256}")
        logger.info("To verify the signature manually:")
        logger.info(f"  {summary.verify_command}")
        return SUCCESS

    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "release", "error": str(err)})
        return CONFIG_ERROR
    except Exception as err:
        logger.error("Runtime error", extra={"command": "release", "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_keystore(args: argparse.Namespace) -> int:
    """Create the keystore from the PEM key, or confirm the existing one."""
    return _run_stages(args, "keystore", KEYSTORE_STAGES)


def handle_build(args: argparse.Namespace) -> int:
    """Clean stale outputs and build the unsigned release APK."""
    return _run_stages(args, "build", BUILD_STAGES)


def handle_locate_signer(args: argparse.Namespace) -> int:
    """Resolve the signer and print its path on stdout."""
    exit_code, context, logger = _load_context(args, "locate_signer")
    if exit_code != SUCCESS or context is None:
        return exit_code

    try:
        report = run_pipeline(context, default_toolchain(context), LOCATOR_STAGES)
        if not report.succeeded:
            return _report_failure(report, logger)
        sys.stdout.write(f"{report.outcomes[-1].value}\n")
        sys.stdout.flush()
        return SUCCESS

    except Exception as err:
        logger.error("Runtime error", extra={"command": "locate_signer", "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_verify(args: argparse.Namespace) -> int:
    """Verify the signature of the published APK (or --artifact)."""
    exit_code, context, logger = _load_context(args, "verify")
    if exit_code != SUCCESS or context is None:
        return exit_code

    artifact = (
        Path(args.artifact).absolute() if args.artifact is not None else context.paths.final_artifact
    )
    try:
        if not artifact.is_file():
            logger.error(f"ERROR: No APK to verify at {artifact}", extra={"path": str(artifact)})
            return STAGE_FAILURE

        signer_config = context.config.signer
        signer_path = locate_signer(context.env, signer_config.sdk_root_env, signer_config.binary)
        signer = default_toolchain(context).signer_factory(signer_path)
        verify_artifact(signer, artifact)
        return SUCCESS

    except PipelineError as err:
        logger.error(f"ERROR: {err}", extra={"stage": err.stage})
        return STAGE_FAILURE
    except Exception as err:
        logger.error("Runtime error", extra={"command": "verify", "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_doctor(args: argparse.Namespace) -> int:
    """Run pre-flight checks; fail if anything a release needs is missing."""
    exit_code, context, logger = _load_context(args, "doctor")
    if exit_code != SUCCESS or context is None:
        return exit_code

    try:
        checks = validate_environment(context, default_toolchain(context))
        failed = [c.name for c in checks if not c.passed]
        if failed:
            logger.error("Environment not ready", extra={"failed_checks": ", ".join(failed)})
            return STAGE_FAILURE
        logger.info("Environment ready")
        return SUCCESS

    except Exception as err:
        logger.error("Runtime error", extra={"command": "doctor", "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Display version and environment information."""
    logger = get_logger("apkship.cli.info", log_level=args.log_level or "INFO")

    from apkship import __version__
    from apkship.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "apkship_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "config": args.config,
        },
    )
    return SUCCESS
