# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Password resolution for the signing keystore.

A plain value in the config wins. Otherwise the environment variable named
in the config is consulted, which is how CI secret stores hand passwords
over. The key password falls back to the keystore password, matching the
common single-password setup.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from apkship.config.exceptions import ConfigValidationError
from apkship.config.schema import SigningConfig


@dataclass(frozen=True)
class Credentials:
    """Resolved passwords. repr is suppressed so they never end up in a log line."""

    keystore_password: str = field(repr=False)
    key_password: str = field(repr=False)


def resolve_credentials(signing: SigningConfig, env: Mapping[str, str]) -> Credentials:
    """
    Work out the keystore and key passwords.

    Raises:
        ConfigValidationError: If no keystore password is configured and the
            fallback environment variable is unset or empty.
    """
    keystore_password = signing.keystore_password or env.get(signing.keystore_password_env, "")
    if not keystore_password:
        raise ConfigValidationError(
            "No keystore password configured: set signing.keystore_password "
            f"or the {signing.keystore_password_env} environment variable"
        )

    key_password = (
        signing.key_password
        or env.get(signing.key_password_env, "")
        or keystore_password
    )
    return Credentials(keystore_password=keystore_password, key_password=key_password)
