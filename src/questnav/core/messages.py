"""QuestNav wire messages.

Each message is an immutable dataclass with ``serialize()`` and a
``deserialize()`` classmethod producing protobuf-compatible bytes. Field
numbers match the upstream ``commands.proto`` / ``data.proto`` definitions
and WPILib's ``geometry2d.proto`` for poses; they must never be renumbered.

Decoders ignore unknown fields and leave missing fields at their default,
so peers deployed at different versions keep talking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from questnav.core.types import NO_TIMESTAMP, UNAVAILABLE, CommandType, Pose2D
from questnav.core.wire import (
    WIRE_FIXED64,
    WIRE_LENGTH_DELIMITED,
    WIRE_VARINT,
    MessageWriter,
    expect_wire_type,
    iter_fields,
    read_double,
    read_string,
    to_int32,
    to_uint32,
)


# --- WPILib ProtobufPose2d ---------------------------------------------------
# ProtobufPose2d { translation = 1; rotation = 2; }
# ProtobufTranslation2d { double x = 1; double y = 2; }
# ProtobufRotation2d { double value = 1; }  (radians)


def encode_pose(pose: Pose2D) -> bytes:
    translation = MessageWriter().double(1, pose.x).double(2, pose.y).to_bytes()
    rotation = MessageWriter().double(1, pose.heading_rad).to_bytes()
    return MessageWriter().message(1, translation).message(2, rotation).to_bytes()


def decode_pose(data: bytes) -> Pose2D:
    x = y = radians = 0.0
    for number, wire_type, raw in iter_fields(data):
        if number == 1:
            expect_wire_type(number, wire_type, WIRE_LENGTH_DELIMITED)
            for t_number, t_type, t_raw in iter_fields(raw):
                if t_number == 1:
                    expect_wire_type(t_number, t_type, WIRE_FIXED64)
                    x = read_double(t_raw)
                elif t_number == 2:
                    expect_wire_type(t_number, t_type, WIRE_FIXED64)
                    y = read_double(t_raw)
        elif number == 2:
            expect_wire_type(number, wire_type, WIRE_LENGTH_DELIMITED)
            for r_number, r_type, r_raw in iter_fields(raw):
                if r_number == 1:
                    expect_wire_type(r_number, r_type, WIRE_FIXED64)
                    radians = read_double(r_raw)
    return Pose2D.from_radians(x, y, radians)


# --- Commands ----------------------------------------------------------------


@dataclass(frozen=True)
class PoseResetPayload:
    """Payload of a POSE_RESET command. Field 1: target_pose."""

    target_pose: Pose2D

    def serialize(self) -> bytes:
        return MessageWriter().message(1, encode_pose(self.target_pose)).to_bytes()

    @classmethod
    def deserialize(cls, data: bytes) -> PoseResetPayload:
        pose = Pose2D.zero()
        for number, wire_type, raw in iter_fields(data):
            if number == 1:
                expect_wire_type(number, wire_type, WIRE_LENGTH_DELIMITED)
                pose = decode_pose(raw)
        return cls(target_pose=pose)


# Union of all command payloads; grows with CommandType
CommandPayload = Union[PoseResetPayload]

# Field number of each payload inside the ``payload`` oneof
_PAYLOAD_FIELDS = {PoseResetPayload: 10}

# Payload type each command type carries
PAYLOAD_TYPES = {CommandType.POSE_RESET: PoseResetPayload}


def _command_type(value: int) -> Union[CommandType, int]:
    """Map a wire ordinal to CommandType, keeping unknown ordinals as ints."""
    try:
        return CommandType(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class Command:
    """ProtobufQuestNavCommand: type = 1, command_id = 2, oneof payload."""

    type: Union[CommandType, int]
    command_id: int
    payload: Optional[CommandPayload] = None

    def serialize(self) -> bytes:
        writer = MessageWriter().varint(1, int(self.type)).varint(2, to_uint32(self.command_id))
        if self.payload is not None:
            writer.message(_PAYLOAD_FIELDS[type(self.payload)], self.payload.serialize())
        return writer.to_bytes()

    @classmethod
    def deserialize(cls, data: bytes) -> Command:
        command_type: Union[CommandType, int] = CommandType.COMMAND_TYPE_UNSPECIFIED
        command_id = 0
        payload: Optional[CommandPayload] = None
        for number, wire_type, raw in iter_fields(data):
            if number == 1:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                command_type = _command_type(to_int32(raw))
            elif number == 2:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                command_id = to_uint32(raw)
            elif number == _PAYLOAD_FIELDS[PoseResetPayload]:
                expect_wire_type(number, wire_type, WIRE_LENGTH_DELIMITED)
                payload = PoseResetPayload.deserialize(raw)
        return cls(type=command_type, command_id=command_id, payload=payload)


@dataclass(frozen=True)
class CommandResponse:
    """ProtobufQuestNavCommandResponse: command_id = 1, success = 2, error_message = 3."""

    command_id: int
    success: bool = False
    error_message: str = ""

    def serialize(self) -> bytes:
        return (
            MessageWriter()
            .varint(1, to_uint32(self.command_id))
            .boolean(2, self.success)
            .string(3, self.error_message)
            .to_bytes()
        )

    @classmethod
    def deserialize(cls, data: bytes) -> CommandResponse:
        command_id = 0
        success = False
        error_message = ""
        for number, wire_type, raw in iter_fields(data):
            if number == 1:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                command_id = to_uint32(raw)
            elif number == 2:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                success = bool(raw)
            elif number == 3:
                expect_wire_type(number, wire_type, WIRE_LENGTH_DELIMITED)
                error_message = read_string(raw)
        return cls(command_id=command_id, success=success, error_message=error_message)


# --- Telemetry ---------------------------------------------------------------


@dataclass(frozen=True)
class FrameData:
    """ProtobufQuestNavFrameData: frame_count = 1, timestamp = 2, pose2d = 3."""

    pose: Pose2D = field(default_factory=Pose2D.zero)
    frame_count: int = 0
    app_timestamp: float = 0.0  # seconds, headset uptime

    def serialize(self) -> bytes:
        return (
            MessageWriter()
            .varint(1, self.frame_count)
            .double(2, self.app_timestamp)
            .message(3, encode_pose(self.pose))
            .to_bytes()
        )

    @classmethod
    def deserialize(cls, data: bytes) -> FrameData:
        pose = Pose2D.zero()
        frame_count = 0
        app_timestamp = 0.0
        for number, wire_type, raw in iter_fields(data):
            if number == 1:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                frame_count = to_int32(raw)
            elif number == 2:
                expect_wire_type(number, wire_type, WIRE_FIXED64)
                app_timestamp = read_double(raw)
            elif number == 3:
                expect_wire_type(number, wire_type, WIRE_LENGTH_DELIMITED)
                pose = decode_pose(raw)
        return cls(pose=pose, frame_count=frame_count, app_timestamp=app_timestamp)


@dataclass(frozen=True)
class DeviceData:
    """ProtobufQuestNavDeviceData: tracking_lost_counter = 1, currently_tracking = 2,
    battery_percent = 3."""

    battery_percent: int = 0  # 0-100
    currently_tracking: bool = False
    tracking_lost_counter: int = 0

    def serialize(self) -> bytes:
        return (
            MessageWriter()
            .varint(1, self.tracking_lost_counter)
            .boolean(2, self.currently_tracking)
            .varint(3, self.battery_percent)
            .to_bytes()
        )

    @classmethod
    def deserialize(cls, data: bytes) -> DeviceData:
        battery_percent = 0
        currently_tracking = False
        tracking_lost_counter = 0
        for number, wire_type, raw in iter_fields(data):
            if number == 1:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                tracking_lost_counter = to_int32(raw)
            elif number == 2:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                currently_tracking = bool(raw)
            elif number == 3:
                expect_wire_type(number, wire_type, WIRE_VARINT)
                battery_percent = to_int32(raw)
        return cls(
            battery_percent=battery_percent,
            currently_tracking=currently_tracking,
            tracking_lost_counter=tracking_lost_counter,
        )


@dataclass(frozen=True)
class FrameSample:
    """Latest frame data and the fabric time it was published at."""

    frame: FrameData
    fabric_timestamp: int  # microseconds, fabric server clock

    @property
    def has_data(self) -> bool:
        return self.fabric_timestamp != NO_TIMESTAMP


# Returned by the telemetry reader before the first frame is published
NO_FRAME_DATA = FrameData(pose=Pose2D.zero(), frame_count=UNAVAILABLE, app_timestamp=float(UNAVAILABLE))
NO_FRAME_SAMPLE = FrameSample(frame=NO_FRAME_DATA, fabric_timestamp=NO_TIMESTAMP)
