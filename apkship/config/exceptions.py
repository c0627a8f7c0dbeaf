# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Configuration failures.

These are raised before any stage runs, so the CLI maps every one of them
to CONFIG_ERROR instead of a stage failure.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """The release config file is missing, unreadable, or not a YAML mapping."""


class ConfigValidationError(ConfigError):
    """
    The config parsed but is unusable: a schema violation, a config_version
    from another major release, or a keystore password that neither the
    config nor the environment provides.
    """
