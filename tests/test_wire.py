"""
Tests for the protobuf-compatible wire encoding and QuestNav messages.
"""

import math

import pytest

from questnav.core.messages import (
    Command,
    CommandResponse,
    DeviceData,
    FrameData,
    PoseResetPayload,
    decode_pose,
    encode_pose,
)
from questnav.core.types import CommandType, Pose2D
from questnav.core.wire import (
    MessageWriter,
    WireFormatError,
    decode_varint,
    encode_varint,
    iter_fields,
    to_int32,
)


class TestVarint:
    """Test varint encoding."""

    def test_small_values(self):
        assert encode_varint(0) == b"\x00"
        assert encode_varint(1) == b"\x01"
        assert encode_varint(127) == b"\x7f"

    def test_multi_byte(self):
        assert encode_varint(300) == b"\xac\x02"
        assert decode_varint(b"\xac\x02", 0) == (300, 2)

    def test_negative_int32_uses_ten_bytes(self):
        encoded = encode_varint(-1)
        assert len(encoded) == 10
        value, offset = decode_varint(encoded, 0)
        assert offset == 10
        assert to_int32(value) == -1

    def test_truncated_varint(self):
        with pytest.raises(WireFormatError):
            decode_varint(b"\x80\x80", 0)


class TestKnownEncodings:
    """Byte-exact encodings, as produced by upstream protobuf peers."""

    def test_command_response(self):
        response = CommandResponse(command_id=1, success=True, error_message="x")
        assert response.serialize() == b"\x08\x01\x10\x01\x1a\x01x"

    def test_default_response_is_empty(self):
        assert CommandResponse(command_id=0).serialize() == b""

    def test_device_data(self):
        data = DeviceData(battery_percent=87, currently_tracking=True, tracking_lost_counter=2)
        assert data.serialize() == b"\x08\x02\x10\x01\x18\x57"

    def test_zero_pose_keeps_submessages(self):
        assert encode_pose(Pose2D.zero()) == b"\x0a\x00\x12\x00"

    def test_pose_reset_command(self):
        command = Command(
            type=CommandType.POSE_RESET,
            command_id=5,
            payload=PoseResetPayload(target_pose=Pose2D.zero()),
        )
        assert command.serialize() == b"\x08\x01\x10\x05\x52\x06\x0a\x04\x0a\x00\x12\x00"


class TestDecoding:
    """Test decoding, including version skew between peers."""

    def test_pose_heading_is_radians_on_wire(self):
        encoded = encode_pose(Pose2D(1.0, 2.0, 90.0))
        fields = {number: raw for number, _, raw in iter_fields(encoded)}
        rotation = list(iter_fields(fields[2]))
        assert rotation[0][0] == 1
        assert decode_pose(encoded).heading == pytest.approx(90.0)
        assert decode_pose(encoded).x == pytest.approx(1.0)
        assert decode_pose(encoded).y == pytest.approx(2.0)

    def test_unknown_fields_are_skipped(self):
        data = CommandResponse(command_id=7, success=False, error_message="boom").serialize()
        # field 15 varint, field 16 string, from a newer peer
        data += b"\x78\x01" + b"\x82\x01\x02hi"
        decoded = CommandResponse.deserialize(data)
        assert decoded == CommandResponse(command_id=7, success=False, error_message="boom")

    def test_missing_fields_default(self):
        decoded = FrameData.deserialize(b"")
        assert decoded.frame_count == 0
        assert decoded.app_timestamp == 0.0
        assert decoded.pose == Pose2D.zero()

    def test_negative_frame_count(self):
        data = MessageWriter().varint(1, -3).to_bytes()
        assert FrameData.deserialize(data).frame_count == -3

    def test_unknown_command_type_kept_as_int(self):
        data = MessageWriter().varint(1, 42).varint(2, 9).to_bytes()
        command = Command.deserialize(data)
        assert command.type == 42
        assert not isinstance(command.type, CommandType)
        assert command.command_id == 9
        assert command.payload is None

    def test_pose_reset_payload_decoded(self):
        command = Command(
            type=CommandType.POSE_RESET,
            command_id=3,
            payload=PoseResetPayload(target_pose=Pose2D(4.5, 1.25, -30.0)),
        )
        decoded = Command.deserialize(command.serialize())
        assert decoded.type is CommandType.POSE_RESET
        assert decoded.command_id == 3
        assert decoded.payload.target_pose.x == pytest.approx(4.5)
        assert decoded.payload.target_pose.heading == pytest.approx(-30.0)

    def test_nan_survives(self):
        frame = FrameData(pose=Pose2D(float("nan"), 0.0, 0.0), frame_count=1, app_timestamp=0.5)
        assert math.isnan(FrameData.deserialize(frame.serialize()).pose.x)

    def test_truncated_string(self):
        with pytest.raises(WireFormatError):
            CommandResponse.deserialize(b"\x1a\x05ab")

    def test_wrong_wire_type(self):
        with pytest.raises(WireFormatError):
            CommandResponse.deserialize(b"\x0a\x00")

    def test_wire_error_is_value_error(self):
        assert issubclass(WireFormatError, ValueError)
