# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for apkship.

Each config section gets its own frozen pydantic model. Frozen means once you
create it, you cannot mutate it. The whole AppConfig is built once by the
loader and handed to every stage explicitly.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Path fields are strings relative to the project root unless they are
absolute. The defaults reproduce the layout of a stock React Native /
Gradle Android project with the signing key under signing/.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_LOG_FORMATS = frozenset({"text", "json"})


class GlobalConfig(BaseModel):
    """Cross-cutting settings: project identity and log output."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="app", description="Human-readable project identifier"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_format: str = Field(
        default="text",
        description="'text' for progress lines, 'json' for JSON lines",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output, relative to project root",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got '{value}'")
        return upper

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        if value not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(_LOG_FORMATS)}, got '{value}'")
        return value


class SigningConfig(BaseModel):
    """
    Where the key material lives and how the keystore is protected.

    Passwords may be given inline (plain values, kept for compatibility with
    existing setups) or left out, in which case they are read from the
    environment variables named by the *_env fields. Resolution happens in
    `apkship.config.credentials`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    private_key: str = Field(
        default="signing/priv_key.pem",
        description="PEM-encoded private key, the only required input",
    )
    keystore: str = Field(
        default="signing/app-release.keystore",
        description="JKS keystore, created once from the private key and reused",
    )
    key_alias: str = Field(
        default="release",
        min_length=1,
        description="Alias of the signing key inside the keystore",
    )
    keystore_password: Optional[str] = Field(
        default=None,
        description="Keystore password. Falls back to keystore_password_env",
    )
    key_password: Optional[str] = Field(
        default=None,
        description="Per-key password. Falls back to key_password_env, then the keystore password",
    )
    keystore_password_env: str = Field(
        default="APKSHIP_KEYSTORE_PASSWORD",
        description="Environment variable consulted when keystore_password is unset",
    )
    key_password_env: str = Field(
        default="APKSHIP_KEY_PASSWORD",
        description="Environment variable consulted when key_password is unset",
    )


class CertificateConfig(BaseModel):
    """Subject and lifetime of the self-signed certificate wrapped around the key."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    subject: str = Field(
        default="/CN=App Release/O=Unknown/OU=Mobile/L=Unknown/ST=Unknown/C=US",
        description="Full distinguished name, tried first",
    )
    fallback_subject: str = Field(
        default="/CN=App Release",
        description="Single-field subject for environments that reject the full DN",
    )
    validity_days: int = Field(
        default=3650,
        ge=1,
        description="Certificate lifetime in days (about ten years)",
    )

    @field_validator("subject", "fallback_subject")
    @classmethod
    def _check_subject(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"subject must be in openssl '/K=V/...' form, got '{value}'")
        return value


class BuildConfig(BaseModel):
    """How the unsigned release APK is produced and where it lands."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    gradle_wrapper: str = Field(
        default="./gradlew",
        description="Build tool executable, run from the project root",
    )
    task: str = Field(
        default="assembleRelease",
        description="Gradle task that produces the unsigned release APK",
    )
    extra_args: list[str] = Field(
        default_factory=list,
        description="Additional arguments appended to the build command",
    )
    clean_directories: list[str] = Field(
        default_factory=lambda: [
            "app/build/intermediates",
            "app/build/outputs",
            "build/intermediates",
            "build/outputs",
        ],
        description="Stale output directories removed before every build",
    )
    native_cache_directory: Optional[str] = Field(
        default="app/.cxx",
        description="Native (CMake) build cache removed before every build, if present",
    )
    unsigned_artifact: str = Field(
        default="app/build/outputs/apk/release/app-release-unsigned.apk",
        description="Where the build tool is expected to write the unsigned APK",
    )


class SignerConfig(BaseModel):
    """Where to look for apksigner and where it writes its output."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    sdk_root_env: str = Field(
        default="ANDROID_HOME",
        description="Environment variable holding the Android SDK root",
    )
    binary: str = Field(
        default="apksigner",
        description="Signer executable name under build-tools/<version>/ and on PATH",
    )
    signed_artifact: str = Field(
        default="app-release-signed.apk",
        description="Intermediate signed APK, renamed into place after verification",
    )


class PublishConfig(BaseModel):
    """Final location of the verified, signed APK."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    final_artifact: str = Field(
        default="app-release.apk",
        description="Published APK path; replaced on every successful run",
    )


class AppConfig(BaseModel):
    """
    Top-level config container.

    Only `global.config_version` is mandatory. Every other section falls back
    to its defaults, so a two-line YAML file is a valid config.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    signing: SigningConfig = Field(default_factory=SigningConfig)
    certificate: CertificateConfig = Field(default_factory=CertificateConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    signer: SignerConfig = Field(default_factory=SignerConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
