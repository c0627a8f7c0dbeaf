# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
ArtifactBuilder backed by the project's Gradle wrapper.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Optional

from apkship.tools.interfaces import ArtifactBuilder
from apkship.tools.process import run_command

# Output directories are cleaned by the build stage itself; Gradle's own
# clean task also wipes the native codegen that autolinking depends on.
_NO_CLEAN = ("-x", "clean")
_NO_DAEMON = "--no-daemon"


class GradleBuilder(ArtifactBuilder):
    """Runs `<wrapper> <task> --no-daemon -x clean` in the project root."""

    name = "gradle"

    def __init__(
        self,
        wrapper: str = "./gradlew",
        task: str = "assembleRelease",
        extra_args: Sequence[str] = (),
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._wrapper = wrapper
        self._task = task
        self._extra_args = tuple(extra_args)
        self._env = env

    def command(self) -> list[str]:
        return [self._wrapper, self._task, _NO_DAEMON, *_NO_CLEAN, *self._extra_args]

    def build_release(self, project_root: Path) -> int:
        # Build output goes straight to the terminal.
        return run_command(self.command(), cwd=project_root, env=self._env)
