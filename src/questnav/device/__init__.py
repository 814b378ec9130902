"""Device (headset) side of the link."""

from questnav.device.commands import INVALID_POSE_MESSAGE, PoseResetCommand
from questnav.device.context import CommandContext, FabricCommandContext, LocalCommandContext
from questnav.device.link import DeviceLink, TrackingMonitor
from questnav.device.processor import SUPERSEDED_MESSAGE, CommandProcessor

__all__ = [
    "CommandContext",
    "CommandProcessor",
    "DeviceLink",
    "FabricCommandContext",
    "INVALID_POSE_MESSAGE",
    "LocalCommandContext",
    "PoseResetCommand",
    "SUPERSEDED_MESSAGE",
    "TrackingMonitor",
]
