"""questnav - Pose-correction commands and localization telemetry between a
robot controller and a tracking headset over a last-value pub/sub fabric."""

from questnav.controller import CommandCorrelator, QuestNav, TelemetryReader
from questnav.core import (
    FRESHNESS_THRESHOLD_MS,
    NO_FRAME_SAMPLE,
    UNAVAILABLE,
    Command,
    CommandResponse,
    CommandType,
    DeviceData,
    FrameData,
    FrameSample,
    Pose2D,
    PoseResetPayload,
    QuestNavConfig,
    Topics,
    load_questnav_config,
)
from questnav.device import CommandProcessor, DeviceLink, PoseResetCommand
from questnav.fabric import Fabric, LocalFabric
from questnav.nodes import SimDeviceNode

__all__ = [
    "Command",
    "CommandCorrelator",
    "CommandProcessor",
    "CommandResponse",
    "CommandType",
    "DeviceData",
    "DeviceLink",
    "FRESHNESS_THRESHOLD_MS",
    "Fabric",
    "FrameData",
    "FrameSample",
    "LocalFabric",
    "NO_FRAME_SAMPLE",
    "Pose2D",
    "PoseResetCommand",
    "PoseResetPayload",
    "QuestNav",
    "QuestNavConfig",
    "SimDeviceNode",
    "TelemetryReader",
    "Topics",
    "UNAVAILABLE",
    "load_questnav_config",
]
