# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for keystore password resolution.
"""

import pytest

from apkship.config.credentials import resolve_credentials
from apkship.config.exceptions import ConfigValidationError
from apkship.config.schema import SigningConfig


def test_plain_values_win_over_environment() -> None:
    signing = SigningConfig(keystore_password="inline-store", key_password="inline-key")
    env = {"APKSHIP_KEYSTORE_PASSWORD": "env-store", "APKSHIP_KEY_PASSWORD": "env-key"}

    creds = resolve_credentials(signing, env)
    assert creds.keystore_password == "inline-store"
    assert creds.key_password == "inline-key"


def test_environment_used_when_plain_values_unset() -> None:
    env = {"APKSHIP_KEYSTORE_PASSWORD": "env-store", "APKSHIP_KEY_PASSWORD": "env-key"}

    creds = resolve_credentials(SigningConfig(), env)
    assert creds.keystore_password == "env-store"
    assert creds.key_password == "env-key"


def test_custom_environment_variable_names() -> None:
    signing = SigningConfig(keystore_password_env="CI_STORE_PASS")

    creds = resolve_credentials(signing, {"CI_STORE_PASS": "from-ci"})
    assert creds.keystore_password == "from-ci"


def test_key_password_falls_back_to_keystore_password() -> None:
    creds = resolve_credentials(SigningConfig(keystore_password="shared"), {})
    assert creds.key_password == "shared"


def test_missing_keystore_password_is_a_config_error() -> None:
    with pytest.raises(ConfigValidationError, match="APKSHIP_KEYSTORE_PASSWORD"):
        resolve_credentials(SigningConfig(), {})


def test_empty_environment_value_counts_as_missing() -> None:
    with pytest.raises(ConfigValidationError):
        resolve_credentials(SigningConfig(), {"APKSHIP_KEYSTORE_PASSWORD": ""})


def test_repr_does_not_leak_passwords() -> None:
    creds = resolve_credentials(SigningConfig(keystore_password="hunter2"), {})
    assert "hunter2" not in repr(creds)
