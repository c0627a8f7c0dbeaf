# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
External tool adapters.

Every third-party executable the pipeline touches (openssl, keytool, the
gradle wrapper, apksigner) sits behind one of the small interfaces in
`apkship.tools.interfaces`. Stages only ever talk to the interfaces, so tests
can hand in fakes and never spawn a real process.
"""
