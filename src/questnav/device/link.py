"""Device-side fabric connection: telemetry publishers and command topics."""

from __future__ import annotations

from typing import List, Optional

from questnav.core.config import QuestNavConfig
from questnav.core.messages import Command, CommandResponse, DeviceData, FrameData
from questnav.core.topics import Topics
from questnav.core.types import Pose2D
from questnav.fabric.base import Fabric
from questnav.fabric.topic import MessagePublisher, MessageQueueSubscriber, TimestampedMessage


class DeviceLink:
    """
    Headset end of the link.

    Publishers (Device -> Controller):
    - frameData: high-rate pose updates
    - deviceData: low-rate health
    - response: command results

    Subscribers (Controller -> Device):
    - request: every command since the last read (send-all queue)
    """

    def __init__(self, fabric: Fabric, config: Optional[QuestNavConfig] = None) -> None:
        config = config or QuestNavConfig()
        self._fabric = fabric
        self._frame_data = MessagePublisher(fabric, config.table, Topics.FRAME_DATA)
        self._device_data = MessagePublisher(fabric, config.table, Topics.DEVICE_DATA)
        self._response = MessagePublisher(fabric, config.table, Topics.RESPONSE)
        self._requests = MessageQueueSubscriber(
            fabric, config.table, Topics.REQUEST, Command, depth=config.request_queue_depth
        )

    def now(self) -> int:
        """Current fabric server time in microseconds."""
        return self._fabric.now()

    def publish_frame_data(self, frame_count: int, app_timestamp: float, pose: Pose2D) -> None:
        """
        Publish one perception sample.

        Args:
            frame_count: Headset frame index
            app_timestamp: Headset uptime in seconds
            pose: Field-relative headset pose
        """
        self._frame_data.set(
            FrameData(pose=pose, frame_count=frame_count, app_timestamp=app_timestamp)
        )

    def publish_device_data(
        self,
        tracking_lost_counter: int,
        currently_tracking: bool,
        battery_percent: int,
    ) -> None:
        self._device_data.set(
            DeviceData(
                battery_percent=battery_percent,
                currently_tracking=currently_tracking,
                tracking_lost_counter=tracking_lost_counter,
            )
        )

    def get_command_requests(self) -> List[TimestampedMessage[Command]]:
        """All commands published since the last call, oldest first."""
        return self._requests.read_queue_values()

    def send_command_success_response(self, command_id: int) -> None:
        self._response.set(CommandResponse(command_id=command_id, success=True))

    def send_command_error_response(self, command_id: int, error_message: str) -> None:
        self._response.set(
            CommandResponse(command_id=command_id, success=False, error_message=error_message)
        )

    def close(self) -> None:
        self._requests.close()


class TrackingMonitor:
    """Counts tracking -> not tracking transitions for this session."""

    def __init__(self) -> None:
        self._had_tracking = False
        self._lost_counter = 0
        self._tracking = False

    def update(self, currently_tracking: bool) -> bool:
        """
        Record the current tracking state.

        Returns:
            True if tracking was lost since the previous update.
        """
        lost = self._had_tracking and not currently_tracking
        if lost:
            self._lost_counter += 1
            print(f"[Device] Tracking lost! Times this session: {self._lost_counter}")
        self._had_tracking = currently_tracking
        self._tracking = currently_tracking
        return lost

    @property
    def lost_counter(self) -> int:
        return self._lost_counter

    @property
    def is_tracking(self) -> bool:
        return self._tracking
