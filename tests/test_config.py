"""
Tests for the link configuration loader.
"""

from pathlib import Path

from questnav.core.config import (
    DEFAULT_QUESTNAV_YAML,
    FIELD_LENGTH_M,
    FRESHNESS_THRESHOLD_MS,
    QuestNavConfig,
    load_questnav_config,
)


class TestQuestNavConfig:
    """Test YAML loading and defaults."""

    def test_defaults(self):
        config = QuestNavConfig.defaults()
        assert config.table == "QuestNav"
        assert config.freshness_threshold_ms == FRESHNESS_THRESHOLD_MS
        assert config.pose_reset_ttl_ms == 50.0
        assert config.field_length_m == FIELD_LENGTH_M
        assert config.request_queue_depth == 20

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "questnav.yaml"
        path.write_text(
            "link:\n"
            "  table: TestNav\n"
            "  freshness_threshold_ms: 250\n"
            "device:\n"
            "  pose_reset_ttl_ms: 100\n"
            "  frame_data_hz: 50\n"
        )
        config = QuestNavConfig.from_yaml(path)
        assert config.table == "TestNav"
        assert config.freshness_threshold_ms == 250
        assert config.pose_reset_ttl_ms == 100
        assert config.frame_data_hz == 50
        # Missing keys keep defaults
        assert config.device_data_hz == 3.0
        assert config.field_width_m == 8.052

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert QuestNavConfig.from_yaml(path) == QuestNavConfig()

    def test_missing_file_falls_back(self, tmp_path):
        config = load_questnav_config(tmp_path / "nope.yaml")
        assert config == QuestNavConfig.defaults()

    def test_shipped_config(self):
        assert DEFAULT_QUESTNAV_YAML.exists()
        config = load_questnav_config()
        assert config == QuestNavConfig.defaults()

    def test_accepts_path(self):
        assert isinstance(DEFAULT_QUESTNAV_YAML, Path)
        assert load_questnav_config(DEFAULT_QUESTNAV_YAML).table == "QuestNav"
