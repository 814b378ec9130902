"""Where command results go.

A command received over the fabric answers on the response topic; one
started locally on the headset (e.g. from a maintenance UI) has nobody
waiting for an answer.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from questnav.device.link import DeviceLink


@runtime_checkable
class CommandContext(Protocol):
    """Sink for command outcomes."""

    def send_success_response(self, command_id: int) -> None:
        ...

    def send_error_response(self, command_id: int, error_message: str) -> None:
        ...


class FabricCommandContext:
    """Answers on the fabric response topic."""

    def __init__(self, link: DeviceLink) -> None:
        self._link = link

    def send_success_response(self, command_id: int) -> None:
        self._link.send_command_success_response(command_id)

    def send_error_response(self, command_id: int, error_message: str) -> None:
        self._link.send_command_error_response(command_id, error_message)


class LocalCommandContext:
    """No-op context for locally initiated commands."""

    def send_success_response(self, command_id: int) -> None:
        pass

    def send_error_response(self, command_id: int, error_message: str) -> None:
        pass
