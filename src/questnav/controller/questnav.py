"""Controller-side entry point to the headset."""

from __future__ import annotations

from typing import Optional

from questnav.controller.correlator import CommandCorrelator
from questnav.controller.telemetry import TelemetryReader
from questnav.core.config import QuestNavConfig
from questnav.core.messages import CommandResponse, FrameSample, PoseResetPayload
from questnav.core.types import CommandType, Pose2D
from questnav.fabric.base import Fabric


class QuestNav:
    """
    Robot-side interface to a QuestNav headset.

    Combines the command correlator (pose resets and their responses) with
    the telemetry and status readers. One instance per connection.

    Usage:
        questnav = QuestNav(fabric)

        # once, when the robot pose is known
        questnav.set_pose(Pose2D(1.0, 2.0, 90.0))

        # every control loop tick
        questnav.command_periodic()
        if questnav.is_connected():
            pose = questnav.get_pose()
    """

    def __init__(self, fabric: Fabric, config: Optional[QuestNavConfig] = None) -> None:
        self._config = config or QuestNavConfig()
        self._commands = CommandCorrelator(fabric, self._config.table)
        self._telemetry = TelemetryReader(
            fabric,
            self._config.table,
            self._config.freshness_threshold_ms,
        )

    # --- Commands ---

    def set_pose(self, pose: Pose2D) -> None:
        """
        Reset the headset's field-relative pose.

        This is the headset's own pose, not the robot's: apply the
        robot-to-headset offset first.
        """
        self._commands.issue(CommandType.POSE_RESET, PoseResetPayload(target_pose=pose))

    def command_periodic(self) -> Optional[CommandResponse]:
        """Process the command response topic. Call once per loop tick."""
        return self._commands.poll()

    # --- Telemetry ---

    def latest_frame(self) -> FrameSample:
        return self._telemetry.latest_frame()

    def get_pose(self) -> Pose2D:
        return self._telemetry.get_pose()

    def get_frame_count(self) -> int:
        return self._telemetry.get_frame_count()

    def get_app_timestamp(self) -> float:
        return self._telemetry.get_app_timestamp()

    def get_data_timestamp(self) -> float:
        return self._telemetry.get_data_timestamp()

    def is_connected(self) -> bool:
        return self._telemetry.is_connected()

    def get_latency(self) -> float:
        """Milliseconds since the newest frame was published (``inf`` if none)."""
        return self._telemetry.latency()

    # --- Status ---

    def get_battery_percent(self) -> int:
        return self._telemetry.get_battery_percent()

    def is_tracking(self) -> bool:
        return self._telemetry.is_tracking()

    def get_tracking_lost_counter(self) -> int:
        return self._telemetry.get_tracking_lost_counter()
