"""Core types for the QuestNav link."""

from questnav.core.config import (
    DEFAULT_QUESTNAV_YAML,
    FRESHNESS_THRESHOLD_MS,
    QuestNavConfig,
    load_questnav_config,
)
from questnav.core.messages import (
    NO_FRAME_DATA,
    NO_FRAME_SAMPLE,
    Command,
    CommandResponse,
    DeviceData,
    FrameData,
    FrameSample,
    PoseResetPayload,
)
from questnav.core.topics import Topics, topic_path
from questnav.core.types import (
    NO_TIMESTAMP,
    UNAVAILABLE,
    CommandType,
    Pose2D,
    TimestampedValue,
)
from questnav.core.wire import WireFormatError

__all__ = [
    "Command",
    "CommandResponse",
    "CommandType",
    "DEFAULT_QUESTNAV_YAML",
    "DeviceData",
    "FRESHNESS_THRESHOLD_MS",
    "FrameData",
    "FrameSample",
    "NO_FRAME_DATA",
    "NO_FRAME_SAMPLE",
    "NO_TIMESTAMP",
    "Pose2D",
    "PoseResetPayload",
    "QuestNavConfig",
    "TimestampedValue",
    "Topics",
    "UNAVAILABLE",
    "WireFormatError",
    "load_questnav_config",
    "topic_path",
]
