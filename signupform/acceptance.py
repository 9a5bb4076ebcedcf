"""Acceptance collaborators for validated registrations.

The controller hands every validated snapshot to an AcceptanceCollaborator.
Completing normally means the registration was accepted; raising means it was
not. A real network client can replace SimulatedAcceptance without touching
the validation engine or the controller.
"""

import asyncio
import logging
from typing import Mapping, Optional

from typing_extensions import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class AcceptanceCollaborator(Protocol):
    """Anything that can accept a validated record asynchronously."""

    async def accept(self, data: Mapping[str, str]) -> None:
        ...


class SimulatedAcceptance:
    """Acceptance stand-in that waits, logs the data and succeeds.

    Attributes:
        delay_seconds: How long each accept call sleeps
        fail_with: Optional exception raised after the delay
        calls: Number of accept invocations so far
        accepted: Snapshots accepted so far, in order
    """

    def __init__(self, delay_seconds: float = 1.0, fail_with: Optional[BaseException] = None):
        self.delay_seconds = delay_seconds
        self.fail_with = fail_with
        self.calls = 0
        self.accepted = []

    async def accept(self, data: Mapping[str, str]) -> None:
        self.calls += 1
        await asyncio.sleep(self.delay_seconds)
        if self.fail_with is not None:
            raise self.fail_with
        self.accepted.append(dict(data))
        logger.info("Registration data: %s", dict(data))


__all__ = [
    "AcceptanceCollaborator",
    "SimulatedAcceptance",
]
