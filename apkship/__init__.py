# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
apkship: release packaging for the Android app.

Turns a PEM private key into a signing keystore, builds the release APK,
signs it, verifies the signature, and publishes the signed artifact.
"""

__version__ = "0.1.0"
