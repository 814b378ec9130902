"""Core types for the QuestNav link."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

# Accessor value meaning "never published". Never a real reading.
UNAVAILABLE = -1

# Fabric timestamp reported for a topic that was never published
NO_TIMESTAMP = -1


class CommandType(IntEnum):
    """Command kinds understood by the headset. Values are wire ordinals."""

    COMMAND_TYPE_UNSPECIFIED = 0
    POSE_RESET = 1


@dataclass(frozen=True)
class Pose2D:
    """Field-relative pose of the headset."""

    x: float        # meters
    y: float        # meters
    heading: float  # degrees, CCW positive

    @classmethod
    def zero(cls) -> Pose2D:
        return cls(0.0, 0.0, 0.0)

    @property
    def heading_rad(self) -> float:
        return math.radians(self.heading)

    @classmethod
    def from_radians(cls, x: float, y: float, heading_rad: float) -> Pose2D:
        return cls(x, y, math.degrees(heading_rad))

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.heading))


@dataclass(frozen=True)
class TimestampedValue:
    """Raw value of a fabric topic and the server time of its publish."""

    value: bytes
    server_time: int  # microseconds, fabric server clock
