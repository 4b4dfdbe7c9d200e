"""Sequential validate-then-check pipeline.

Each stage takes the current value and returns the next one (or ``None`` to
pass the value through unchanged). A stage signals failure by raising a
``ReservationSystemError``; the pipeline turns that into an ``Err`` and stops.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

import structlog

from app.services.errors import ReservationSystemError

logger = structlog.get_logger()

T = TypeVar("T")

Stage = Callable[[Any], Optional[Any]]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: ReservationSystemError
    stage: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Ok, Err]


def _stage_name(stage: Stage) -> str:
    func = getattr(stage, "func", stage)
    return getattr(func, "__name__", repr(func))


class Pipeline:
    """Ordered composition of stages"""

    def __init__(self, name: str, stages: Sequence[Stage]):
        self.name = name
        self.stages = list(stages)

    def then(self, stage: Stage) -> "Pipeline":
        return Pipeline(self.name, self.stages + [stage])

    def run(self, value: Any) -> Result:
        for stage in self.stages:
            try:
                result = stage(value)
            except ReservationSystemError as e:
                name = _stage_name(stage)
                logger.info(
                    "Pipeline rejected request",
                    pipeline=self.name,
                    stage=name,
                    kind=e.kind,
                    reason=e.reason,
                )
                return Err(e, stage=name)
            if result is not None:
                value = result
        return Ok(value)
