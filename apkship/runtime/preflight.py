# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pre-flight checks behind `apkship doctor`.

Reports, without changing anything, whether every input and tool a release
run needs is in place:
- Python version
- private key
- keystore (informational: absent just means it will be created)
- openssl and keytool (only required while no keystore exists)
- the gradle wrapper
- the signer

Fail early with clear errors instead of ten minutes into a Gradle build.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from apkship.errors import SignerNotFoundError
from apkship.logging.logger import get_logger
from apkship.pipeline.context import ReleaseContext, Toolchain
from apkship.runtime.environment import (
    MINIMUM_PYTHON_MAJOR,
    MINIMUM_PYTHON_MINOR,
    get_system_info,
    meets_minimum_python,
)
from apkship.stages.signer_locator import locate_signer
from apkship.tools.process import find_executable

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class EnvironmentCheck:
    """Result of a single pre-flight check."""

    name: str
    passed: bool
    message: str
    value: str


def check_python_version() -> EnvironmentCheck:
    version = get_system_info().python_version
    minimum = f"{MINIMUM_PYTHON_MAJOR}.{MINIMUM_PYTHON_MINOR}"
    passed = meets_minimum_python()
    if passed:
        msg = f"Python {version} meets minimum {minimum}"
    else:
        msg = f"Python {version} does NOT meet minimum {minimum}"
    return EnvironmentCheck(name="python_version", passed=passed, message=msg, value=version)


def check_private_key(private_key: Path) -> EnvironmentCheck:
    if private_key.is_file():
        return EnvironmentCheck("private_key", True, "Private key present", str(private_key))
    return EnvironmentCheck(
        "private_key", False, f"Private key not found at {private_key}", str(private_key)
    )


def check_keystore(keystore: Path) -> EnvironmentCheck:
    if keystore.exists():
        return EnvironmentCheck("keystore", True, "Existing keystore will be reused", str(keystore))
    return EnvironmentCheck(
        "keystore", True, "No keystore yet, it will be created from the private key", "absent"
    )


def check_keystore_tools(context: ReleaseContext, toolchain: Toolchain) -> list[EnvironmentCheck]:
    """openssl and keytool only matter while the keystore still has to be created."""
    needed = not context.paths.keystore.exists()
    checks = []
    for tool in (toolchain.certificate_authority, toolchain.keystore_converter):
        available = tool.is_available()
        if available:
            msg = f"{tool.name} available"
        elif needed:
            msg = f"{tool.name} is required to create the keystore but is not installed"
        else:
            msg = f"{tool.name} not installed (not needed, keystore exists)"
        checks.append(
            EnvironmentCheck(
                name=tool.name,
                passed=available or not needed,
                message=msg,
                value="available" if available else "missing",
            )
        )
    return checks


def check_gradle_wrapper(context: ReleaseContext) -> EnvironmentCheck:
    wrapper = context.config.build.gradle_wrapper
    local = context.project_root / wrapper
    if local.is_file():
        return EnvironmentCheck("gradle_wrapper", True, "Build tool found", str(local))
    on_path = find_executable(wrapper, context.env)
    if on_path is not None:
        return EnvironmentCheck("gradle_wrapper", True, "Build tool found on PATH", str(on_path))
    return EnvironmentCheck(
        "gradle_wrapper", False, f"Build tool '{wrapper}' not found in {context.project_root}", "missing"
    )


def check_signer(context: ReleaseContext) -> EnvironmentCheck:
    signer = context.config.signer
    try:
        path = locate_signer(context.env, signer.sdk_root_env, signer.binary)
    except SignerNotFoundError as err:
        return EnvironmentCheck("signer", False, str(err), "missing")
    return EnvironmentCheck("signer", True, f"Found {signer.binary}", str(path))


def validate_environment(context: ReleaseContext, toolchain: Toolchain) -> list[EnvironmentCheck]:
    """
    Run every pre-flight check and log the results.

    Returns:
        List of EnvironmentCheck results. Callers decide what to do with
        the failures.
    """
    checks = [
        check_python_version(),
        check_private_key(context.paths.private_key),
        check_keystore(context.paths.keystore),
        *check_keystore_tools(context, toolchain),
        check_gradle_wrapper(context),
        check_signer(context),
    ]

    for check in checks:
        log_fn = _logger.info if check.passed else _logger.error
        log_fn(
            "Environment check",
            extra={
                "check": check.name,
                "passed": check.passed,
                "check_message": check.message,
            },
        )

    passed_count = sum(1 for c in checks if c.passed)
    _logger.info(
        "Environment validation complete",
        extra={"passed": passed_count, "failed": len(checks) - passed_count},
    )
    return checks
