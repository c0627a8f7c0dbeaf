# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes.

Every pipeline stage failure exits with 1, whatever the stage. Codes 2 and 3
separate "your config is wrong" from "something nobody anticipated broke".
"""

SUCCESS: int = 0
STAGE_FAILURE: int = 1
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
