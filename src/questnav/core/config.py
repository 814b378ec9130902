"""Link configuration dataclass and YAML loader."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

# Maximum age of the newest frameData sample before the headset is
# considered disconnected. One value for every consumer of the link.
FRESHNESS_THRESHOLD_MS = 50.0

# Pose reset requests older than this are refused by the headset
POSE_RESET_TTL_MS = 50.0

# FRC field dimensions (meters) used to bounds-check pose resets
FIELD_LENGTH_M = 17.548
FIELD_WIDTH_M = 8.052


@dataclass
class QuestNavConfig:
    """Configuration shared by both ends of the link."""

    table: str = "QuestNav"
    freshness_threshold_ms: float = FRESHNESS_THRESHOLD_MS

    # Device side
    pose_reset_ttl_ms: float = POSE_RESET_TTL_MS
    field_length_m: float = FIELD_LENGTH_M
    field_width_m: float = FIELD_WIDTH_M
    frame_data_hz: float = 100.0
    device_data_hz: float = 3.0
    request_queue_depth: int = 20  # commands kept between two device ticks

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "QuestNavConfig":
        """Load config from YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        link = data.get("link", {})
        device = data.get("device", {})

        return cls(
            table=link.get("table", "QuestNav"),
            freshness_threshold_ms=link.get("freshness_threshold_ms", FRESHNESS_THRESHOLD_MS),
            pose_reset_ttl_ms=device.get("pose_reset_ttl_ms", POSE_RESET_TTL_MS),
            field_length_m=device.get("field_length_m", FIELD_LENGTH_M),
            field_width_m=device.get("field_width_m", FIELD_WIDTH_M),
            frame_data_hz=device.get("frame_data_hz", 100.0),
            device_data_hz=device.get("device_data_hz", 3.0),
            request_queue_depth=device.get("request_queue_depth", 20),
        )

    @classmethod
    def defaults(cls) -> "QuestNavConfig":
        """Create with default values."""
        return cls()


# Default config path
DEFAULT_QUESTNAV_YAML = Path(__file__).parent.parent.parent.parent / "config" / "questnav.yaml"


def load_questnav_config(yaml_path: Optional[Path] = None) -> QuestNavConfig:
    """Load link config from YAML, falling back to defaults."""
    path = yaml_path or DEFAULT_QUESTNAV_YAML
    if path.exists():
        return QuestNavConfig.from_yaml(path)
    return QuestNavConfig.defaults()
