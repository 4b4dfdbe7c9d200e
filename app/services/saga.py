"""Ordered multi-record writes with compensating actions.

Used when the store cannot group writes into one transaction. Steps run in
order; when one fails, the compensations of the completed steps run in
reverse. A compensation that fails leaves the records inconsistent and is
reported as ``PartialAssignmentError``.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

import structlog

from app.services.errors import PartialAssignmentError

logger = structlog.get_logger()


@dataclass
class SagaStep:
    name: str
    action: Callable[[], Awaitable[Any]]
    compensation: Optional[Callable[[], Awaitable[Any]]] = None


class Saga:
    def __init__(self, name: str, **context):
        self.name = name
        self.context = context
        self.steps: List[SagaStep] = []

    def step(
        self,
        name: str,
        action: Callable[[], Awaitable[Any]],
        compensation: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> "Saga":
        self.steps.append(SagaStep(name, action, compensation))
        return self

    async def execute(self) -> List[Any]:
        """Run every step and return their results in order"""
        results = []
        completed: List[SagaStep] = []
        for step in self.steps:
            try:
                results.append(await step.action())
            except Exception as e:
                logger.warning(
                    "Saga step failed, compensating",
                    saga=self.name,
                    step=step.name,
                    error=str(e),
                    **self.context,
                )
                await self._compensate(completed, e)
                raise
            completed.append(step)
        return results

    async def _compensate(self, completed: List[SagaStep], cause: Exception) -> None:
        for step in reversed(completed):
            if step.compensation is None:
                continue
            try:
                await step.compensation()
            except Exception as e:
                logger.critical(
                    "Saga compensation failed",
                    saga=self.name,
                    step=step.name,
                    error=str(e),
                    cause=str(cause),
                    event_type="data_integrity",
                    **self.context,
                )
                raise PartialAssignmentError(
                    f"{self.name}: could not undo '{step.name}' after a failed write; "
                    "records are inconsistent"
                ) from e
