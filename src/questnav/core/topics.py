"""Topic name constants."""


class Topics:
    """Central registry of topic names."""

    # Fabric table holding the four QuestNav channels
    TABLE = "QuestNav"

    # Fabric channels (relative to TABLE)
    REQUEST = "request"  # Controller publishes Command
    RESPONSE = "response"  # Device publishes CommandResponse
    FRAME_DATA = "frameData"  # Device publishes FrameData (high rate)
    DEVICE_DATA = "deviceData"  # Device publishes DeviceData (low rate)

    # In-process events (pypubsub)
    COMMAND_FAILURE = "questnav.command.failure"  # Correlator: matched response with success=False
    COMMAND_SUCCESS = "questnav.command.success"  # Correlator: matched response with success=True
    POSE_RESET = "questnav.device.pose_reset"  # Device: pose reset accepted


def topic_path(table: str, topic: str) -> str:
    """Full fabric path of a topic, e.g. ``/QuestNav/frameData``."""
    return f"/{table}/{topic}"
