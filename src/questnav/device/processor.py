"""Command processing on the headset."""

from __future__ import annotations

from questnav.core.config import POSE_RESET_TTL_MS
from questnav.core.types import CommandType
from questnav.device.commands import PoseResetCommand
from questnav.device.context import FabricCommandContext
from questnav.device.link import DeviceLink

SUPERSEDED_MESSAGE = "Pose Reset Command superseded"


class CommandProcessor:
    """
    Executes commands received from the robot.

    Every command published since the previous tick is read from the
    request queue, in order:

    - all pose resets but the newest are answered as superseded;
    - the newest pose reset runs only if it is younger than the TTL
      (fabric server clock), otherwise it is answered as too old;
    - unknown command types are logged and left unanswered.
    """

    def __init__(
        self,
        link: DeviceLink,
        pose_reset: PoseResetCommand,
        pose_reset_ttl_ms: float = POSE_RESET_TTL_MS,
    ) -> None:
        self._link = link
        self._context = FabricCommandContext(link)
        self._pose_reset = pose_reset
        self._ttl_ms = pose_reset_ttl_ms

    def process_commands(self) -> int:
        """
        Handle all pending commands.

        Returns:
            Number of commands executed (not counting skipped ones).
        """
        received = self._link.get_command_requests()
        pose_resets = [r for r in received if r.value.type == CommandType.POSE_RESET]
        superseded = {id(r) for r in pose_resets[:-1]}

        executed = 0
        for stamped in received:
            command = stamped.value
            if command.type == CommandType.COMMAND_TYPE_UNSPECIFIED:
                continue

            if command.type == CommandType.POSE_RESET:
                if id(stamped) in superseded:
                    print(f"[CommandProcessor] Skipping superseded Pose Reset Command. ID: {command.command_id}")
                    self._context.send_error_response(command.command_id, SUPERSEDED_MESSAGE)
                    continue

                age_ms = (self._link.now() - stamped.server_time) / 1000.0
                if age_ms < self._ttl_ms:
                    print(
                        f"[CommandProcessor] Executing Pose Reset Command. "
                        f"ID: {command.command_id} Age: {age_ms:.1f} ms"
                    )
                    self._pose_reset.execute(command)
                    executed += 1
                else:
                    message = f"Pose Reset Command too old. Age: {age_ms:.1f} ms > {self._ttl_ms:.1f} ms"
                    print(f"[CommandProcessor] Skipping stale Pose Reset Command. ID: {command.command_id}")
                    self._context.send_error_response(command.command_id, message)
                continue

            print(
                f"[CommandProcessor] Warning: unknown command. "
                f"ID: {command.command_id} Type: {command.type}"
            )
        return executed
