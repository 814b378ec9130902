"""Telemetry, status and link freshness accessors for the Controller."""

from __future__ import annotations

from typing import Optional

from questnav.core.config import FRESHNESS_THRESHOLD_MS
from questnav.core.messages import NO_FRAME_SAMPLE, DeviceData, FrameData, FrameSample
from questnav.core.topics import Topics
from questnav.core.types import UNAVAILABLE, Pose2D
from questnav.fabric.base import Fabric
from questnav.fabric.topic import MessageSubscriber


class TelemetryReader:
    """
    Snapshot reads of the frameData and deviceData topics.

    Nothing here blocks or raises for missing data: a topic that was never
    published reads as a documented sentinel (UNAVAILABLE / False / zero
    pose with NO_TIMESTAMP).

    Liveness is judged from the fabric server time of the newest frameData
    publish, compared to the fabric's current time, so neither peer's local
    clock is involved.
    """

    def __init__(
        self,
        fabric: Fabric,
        table: str = Topics.TABLE,
        freshness_threshold_ms: float = FRESHNESS_THRESHOLD_MS,
    ) -> None:
        self._fabric = fabric
        self._frame_data = MessageSubscriber(fabric, table, Topics.FRAME_DATA, FrameData)
        self._device_data = MessageSubscriber(fabric, table, Topics.DEVICE_DATA, DeviceData)
        self._threshold_ms = freshness_threshold_ms

    @property
    def freshness_threshold_ms(self) -> float:
        return self._threshold_ms

    # --- Frame data ---

    def latest_frame(self) -> FrameSample:
        """Newest frame and the fabric time it was published at."""
        stamped = self._frame_data.get_atomic()
        if stamped is None:
            return NO_FRAME_SAMPLE
        return FrameSample(frame=stamped.value, fabric_timestamp=stamped.server_time)

    def get_pose(self) -> Pose2D:
        """Field-relative headset pose; zero pose if unavailable."""
        return self.latest_frame().frame.pose

    def get_frame_count(self) -> int:
        """Headset frame counter; UNAVAILABLE if no frame was received."""
        return self.latest_frame().frame.frame_count

    def get_app_timestamp(self) -> float:
        """Headset uptime (s) at capture; UNAVAILABLE if no frame was received."""
        return self.latest_frame().frame.app_timestamp

    def get_data_timestamp(self) -> float:
        """Fabric server time (s) of the newest frame; UNAVAILABLE if none."""
        sample = self.latest_frame()
        if not sample.has_data:
            return float(UNAVAILABLE)
        return sample.fabric_timestamp / 1e6

    # --- Freshness ---

    def age_us(self) -> Optional[int]:
        """Microseconds since the last frameData publish, None if never published."""
        last_change = self._frame_data.last_change()
        if last_change is None:
            return None
        return self._fabric.now() - last_change

    def is_connected(self) -> bool:
        """True while the newest frame is younger than the freshness threshold."""
        age = self.age_us()
        if age is None:
            return False
        return age / 1000.0 < self._threshold_ms

    def latency(self) -> float:
        """
        Age of the newest frame in milliseconds.

        This is a staleness metric, not a round trip. Returns ``inf`` if
        frame data was never published.
        """
        age = self.age_us()
        if age is None:
            return float("inf")
        return age / 1000.0

    # --- Device data ---

    def get_battery_percent(self) -> int:
        """Battery level 0-100; UNAVAILABLE if no device data was received."""
        device = self._device_data.get()
        return device.battery_percent if device is not None else UNAVAILABLE

    def is_tracking(self) -> bool:
        """Whether the headset is tracking; False if unknown."""
        device = self._device_data.get()
        return device.currently_tracking if device is not None else False

    def get_tracking_lost_counter(self) -> int:
        """Tracking-lost events this session; UNAVAILABLE if unknown."""
        device = self._device_data.get()
        return device.tracking_lost_counter if device is not None else UNAVAILABLE


__all__ = ["TelemetryReader"]
