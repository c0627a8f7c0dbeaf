# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tagged stage outcomes.

Each stage call is captured as either a Success carrying the stage's value
or a Failure carrying the PipelineError it raised. The runner folds these
left to right and stops at the first Failure.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from apkship.errors import STAGE_PUBLICATION, PipelineError, StageIOError


@dataclass(frozen=True)
class Success:
    stage: str
    value: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    stage: str
    error: PipelineError

    @property
    def ok(self) -> bool:
        return False


StageOutcome = Union[Success, Failure]


def attempt(stage: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> StageOutcome:
    """
    Call `fn` and tag the result.

    PipelineError becomes a Failure as is. An OSError that a stage did not
    translate itself is wrapped in a StageIOError tagged with `stage`, so a
    filesystem refusal still stops the run at a named stage. Anything else
    is a bug and propagates.
    """
    try:
        return Success(stage=stage, value=fn(*args, **kwargs))
    except PipelineError as err:
        return Failure(stage=stage, error=err)
    except OSError as err:
        path = Path(err.filename) if err.filename else None
        error = StageIOError(f"{stage} stage failed: {err}", stage=stage, path=path)
        error.__cause__ = err
        return Failure(stage=stage, error=error)


@dataclass(frozen=True)
class PipelineReport:
    """Every outcome of a run, in order. At most the last one is a Failure."""

    outcomes: list[StageOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.outcomes) and all(o.ok for o in self.outcomes)

    @property
    def failure(self) -> Optional[Failure]:
        for outcome in self.outcomes:
            if isinstance(outcome, Failure):
                return outcome
        return None

    def value_of(self, stage: str) -> Any:
        """The value a successful stage produced, or None."""
        for outcome in self.outcomes:
            if isinstance(outcome, Success) and outcome.stage == stage:
                return outcome.value
        return None

    @property
    def published_artifact(self) -> Optional[Path]:
        return self.value_of(STAGE_PUBLICATION)
