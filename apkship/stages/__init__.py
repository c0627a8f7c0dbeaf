# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The six release stages, one module each.

Stages are plain functions. They take explicit paths and tool objects, do
their one job, and raise an `apkship.errors.PipelineError` subclass on
failure. Sequencing and short-circuiting live in `apkship.pipeline`.
"""
