"""Harvest orchestration: navigation, collection and hand-off to the grid."""

from __future__ import annotations

from .driver import PageDriver
from .orchestrator import HarvestOrchestrator, HarvestPhase, HarvestState
from .signals import ReadySignalHub, ReadyWaiter

__all__ = [
    "HarvestOrchestrator",
    "HarvestPhase",
    "HarvestState",
    "PageDriver",
    "ReadySignalHub",
    "ReadyWaiter",
]
