# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run context and toolchain wiring.

`ReleaseContext` is everything a run needs, resolved once up front: the
frozen config, the project root, absolute paths for every file the pipeline
touches, the environment, and the passwords. Stages receive what they need
from it as explicit arguments; nothing is read from module globals.

`Toolchain` bundles the tool objects. The default one spawns real
processes; tests build their own from fakes.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from apkship.config.credentials import Credentials, resolve_credentials
from apkship.config.schema import AppConfig
from apkship.tools.apksigner import ApkSigner
from apkship.tools.gradle import GradleBuilder
from apkship.tools.interfaces import (
    ArtifactBuilder,
    CertificateAuthority,
    KeystoreConverter,
    Signer,
)
from apkship.tools.keytool import KeytoolConverter
from apkship.tools.openssl import OpenSSLCertificateAuthority
from apkship.utils.paths import resolve_project_path


@dataclass(frozen=True)
class ReleasePaths:
    """Absolute paths of every file and directory the pipeline reads or writes."""

    private_key: Path
    keystore: Path
    unsigned_artifact: Path
    signed_artifact: Path
    final_artifact: Path
    clean_directories: tuple[Path, ...]
    native_cache: Optional[Path]
    log_file: Optional[Path]


@dataclass(frozen=True)
class ReleaseContext:
    """Immutable inputs for one run."""

    config: AppConfig
    project_root: Path
    paths: ReleasePaths
    env: Mapping[str, str] = field(repr=False)
    credentials: Optional[Credentials] = field(default=None, repr=False)

    def require_credentials(self) -> Credentials:
        """
        Passwords for stages that need them.

        Raises:
            ConfigValidationError: If they could not be resolved.
        """
        if self.credentials is not None:
            return self.credentials
        return resolve_credentials(self.config.signing, self.env)


def resolve_paths(config: AppConfig, project_root: Path) -> ReleasePaths:
    """Anchor every configured path at `project_root`."""

    def resolve(value: str) -> Path:
        return resolve_project_path(project_root, value)

    build = config.build
    return ReleasePaths(
        private_key=resolve(config.signing.private_key),
        keystore=resolve(config.signing.keystore),
        unsigned_artifact=resolve(build.unsigned_artifact),
        signed_artifact=resolve(config.signer.signed_artifact),
        final_artifact=resolve(config.publish.final_artifact),
        clean_directories=tuple(resolve(d) for d in build.clean_directories),
        native_cache=resolve(build.native_cache_directory) if build.native_cache_directory else None,
        log_file=resolve(config.global_config.log_file) if config.global_config.log_file else None,
    )


def build_context(
    config: AppConfig,
    project_root: Path,
    env: Optional[Mapping[str, str]] = None,
    credentials: Optional[Credentials] = None,
) -> ReleaseContext:
    """
    Assemble the context for a run.

    Credentials are resolved lazily by `require_credentials` unless passed
    in, so commands that never sign (build, locate-signer, doctor) do not
    demand a password.
    """
    environment = dict(os.environ) if env is None else dict(env)
    return ReleaseContext(
        config=config,
        project_root=project_root,
        paths=resolve_paths(config, project_root),
        env=environment,
        credentials=credentials,
    )


@dataclass(frozen=True)
class Toolchain:
    """The external tools a run uses. `signer_factory` turns a located path into a Signer."""

    certificate_authority: CertificateAuthority
    keystore_converter: KeystoreConverter
    artifact_builder: ArtifactBuilder
    signer_factory: Callable[[Path], Signer]


def default_toolchain(context: ReleaseContext) -> Toolchain:
    """Real subprocess-backed tools, configured from the context."""
    env = context.env
    build = context.config.build
    return Toolchain(
        certificate_authority=OpenSSLCertificateAuthority(env=env),
        keystore_converter=KeytoolConverter(env=env),
        artifact_builder=GradleBuilder(
            wrapper=build.gradle_wrapper,
            task=build.task,
            extra_args=build.extra_args,
            env=env,
        ),
        signer_factory=lambda path: ApkSigner(path, env=env),
    )
