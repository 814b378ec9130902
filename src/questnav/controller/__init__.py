"""Controller (robot) side of the link."""

from questnav.controller.correlator import MAX_COMMAND_ID, CommandCorrelator
from questnav.controller.questnav import QuestNav
from questnav.controller.telemetry import TelemetryReader

__all__ = [
    "CommandCorrelator",
    "MAX_COMMAND_ID",
    "QuestNav",
    "TelemetryReader",
]
