"""Command issuing and response correlation over last-value topics."""

from __future__ import annotations

from typing import Optional, Union

from pubsub import pub

from questnav.core.messages import PAYLOAD_TYPES, Command, CommandPayload, CommandResponse
from questnav.core.topics import Topics
from questnav.core.types import CommandType
from questnav.fabric.base import Fabric
from questnav.fabric.topic import MessagePublisher, MessageSubscriber

# command_id is a uint32 on the wire
MAX_COMMAND_ID = 0xFFFFFFFF


class CommandCorrelator:
    """
    Issues one-shot commands and matches them to their responses.

    The fabric only ever shows the current value of the response topic, so
    matching is a pure function of ids:

    - a response whose id is not the last id sent belongs to a superseded
      command and is ignored;
    - a response already acted upon is ignored, since the same value stays
      visible on every poll until the Device overwrites it.

    Single-threaded: call ``issue`` and ``poll`` from the control loop only.

    Usage:
        correlator = CommandCorrelator(fabric)
        correlator.issue(CommandType.POSE_RESET, PoseResetPayload(pose))

        while running:
            correlator.poll()  # once per tick
    """

    def __init__(self, fabric: Fabric, table: str = Topics.TABLE) -> None:
        self._request = MessagePublisher(fabric, table, Topics.REQUEST)
        self._response = MessageSubscriber(fabric, table, Topics.RESPONSE, CommandResponse)
        self._last_sent_id = 0
        self._last_processed_response_id = 0

    def issue(
        self,
        command_type: Union[CommandType, int],
        payload: Optional[CommandPayload] = None,
    ) -> None:
        """
        Publish a new command, overwriting any unacknowledged one.

        Args:
            command_type: Kind of command to send.
            payload: Payload matching ``command_type``.

        Raises:
            TypeError: If the payload does not match the command type.
            OverflowError: If the uint32 command id space is exhausted.
        """
        expected = PAYLOAD_TYPES.get(command_type)
        if expected is not None and not isinstance(payload, expected):
            raise TypeError(
                f"{CommandType(command_type).name} expects {expected.__name__}, "
                f"got {type(payload).__name__}"
            )
        if self._last_sent_id >= MAX_COMMAND_ID:
            raise OverflowError("Command id space exhausted for this connection")

        self._last_sent_id += 1
        self._request.set(
            Command(type=command_type, command_id=self._last_sent_id, payload=payload)
        )

    def poll(self) -> Optional[CommandResponse]:
        """
        Check the response topic for the outcome of the current command.

        Returns:
            The response if it was acted upon during this call, else None.
        """
        response = self._response.get()
        if response is None:
            return None

        # Response to a superseded command (or to nothing we sent)
        if response.command_id != self._last_sent_id:
            return None

        # Already handled on an earlier tick
        if response.command_id == self._last_processed_response_id:
            return None

        if response.success:
            pub.sendMessage(Topics.COMMAND_SUCCESS, response=response)
        else:
            print(f"[QuestNav] Command {response.command_id} failed: {response.error_message}")
            pub.sendMessage(Topics.COMMAND_FAILURE, response=response)

        self._last_processed_response_id = response.command_id
        return response
