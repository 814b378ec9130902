"""Command handlers executed on the headset."""

from __future__ import annotations

from typing import Callable

from pubsub import pub

from questnav.core.config import FIELD_LENGTH_M, FIELD_WIDTH_M
from questnav.core.messages import Command, PoseResetPayload
from questnav.core.topics import Topics
from questnav.core.types import Pose2D
from questnav.device.context import CommandContext

INVALID_POSE_MESSAGE = "Failed to get valid pose data (Out of bounds or invalid)"


class PoseResetCommand:
    """
    Moves the headset's field frame so its current pose becomes the target.

    The target must be finite and inside the field. The actual re-anchoring
    is delegated to ``reset_pose``, supplied by whatever owns the tracking
    frame (the perception pipeline, or SimDeviceNode in simulation).
    """

    name = "PoseReset"

    def __init__(
        self,
        context: CommandContext,
        reset_pose: Callable[[Pose2D], None],
        field_length_m: float = FIELD_LENGTH_M,
        field_width_m: float = FIELD_WIDTH_M,
    ) -> None:
        self._context = context
        self._reset_pose = reset_pose
        self._field_length = field_length_m
        self._field_width = field_width_m

    def is_valid_pose(self, pose: Pose2D) -> bool:
        if not pose.is_finite():
            return False
        in_bounds = 0.0 <= pose.x <= self._field_length and 0.0 <= pose.y <= self._field_width
        if not in_bounds:
            print(f"[PoseReset] Pose out of field bounds: ({pose.x}, {pose.y})")
        return in_bounds

    def execute(self, command: Command) -> bool:
        """
        Apply the reset and answer through the context.

        Returns:
            True if the pose was applied.
        """
        payload = command.payload
        if not isinstance(payload, PoseResetPayload) or not self.is_valid_pose(payload.target_pose):
            print(f"[PoseReset] Invalid pose data in command {command.command_id}")
            self._context.send_error_response(command.command_id, INVALID_POSE_MESSAGE)
            return False

        pose = payload.target_pose
        try:
            self._reset_pose(pose)
        except Exception as e:
            print(f"[PoseReset] Reset failed: {e}")
            self._context.send_error_response(command.command_id, f"Pose reset failed: {e}")
            return False

        print(f"[PoseReset] Pose reset applied: X={pose.x}, Y={pose.y}, Heading={pose.heading}")
        pub.sendMessage(Topics.POSE_RESET, pose=pose)
        self._context.send_success_response(command.command_id)
        return True
