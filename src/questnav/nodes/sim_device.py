"""Simulated headset node - publishes telemetry and answers commands."""

from __future__ import annotations

import time
from threading import Lock, Thread
from typing import Optional

from questnav.core.config import QuestNavConfig
from questnav.core.types import Pose2D
from questnav.device.commands import PoseResetCommand
from questnav.device.context import FabricCommandContext
from questnav.device.link import DeviceLink, TrackingMonitor
from questnav.device.processor import CommandProcessor
from questnav.fabric.base import Fabric


class SimDeviceNode:
    """
    Fake headset - the Device peer for loopback runs.

    Each tick it publishes frameData, processes pending commands, and every
    few ticks publishes deviceData, mirroring the headset's fixed update.
    ``step()`` runs one tick synchronously; ``start()`` runs ticks on a
    background thread at ``config.frame_data_hz``. The two are exclusive:
    ``step()`` is refused while the thread is running.

    ``stop()`` only ends the thread, so the node can be started again.
    ``close()`` also releases the request queue; call it once on shutdown.

    Usage:
        device = SimDeviceNode(fabric)
        device.start()
        # ... run the robot control loop ...
        device.stop()
        device.close()
    """

    def __init__(
        self,
        fabric: Fabric,
        config: Optional[QuestNavConfig] = None,
        initial_pose: Optional[Pose2D] = None,
        battery_percent: int = 100,
    ) -> None:
        self._config = config or QuestNavConfig()
        self._link = DeviceLink(fabric, self._config)
        self._tracking = TrackingMonitor()
        self._pose_reset = PoseResetCommand(
            FabricCommandContext(self._link),
            self.reset_pose,
            field_length_m=self._config.field_length_m,
            field_width_m=self._config.field_width_m,
        )
        self._processor = CommandProcessor(
            self._link, self._pose_reset, self._config.pose_reset_ttl_ms
        )

        self._pose = initial_pose or Pose2D.zero()
        self._battery_percent = battery_percent
        self._currently_tracking = True
        self._frame_count = 0
        self._start_time = time.monotonic()
        self._device_every = max(1, round(self._config.frame_data_hz / self._config.device_data_hz))
        self._lock = Lock()

        self._interval = 1.0 / self._config.frame_data_hz
        self._running = False
        self._thread: Optional[Thread] = None

    # --- Simulated perception state ---

    def reset_pose(self, pose: Pose2D) -> None:
        """Pose reset hook: re-anchor the simulated field frame."""
        with self._lock:
            self._pose = pose

    def set_tracking(self, tracking: bool) -> None:
        with self._lock:
            self._currently_tracking = tracking

    def set_battery_percent(self, percent: int) -> None:
        with self._lock:
            self._battery_percent = max(0, min(100, percent))

    @property
    def pose(self) -> Pose2D:
        with self._lock:
            return self._pose

    @property
    def frame_count(self) -> int:
        return self._frame_count

    # --- Loop ---

    def step(self) -> None:
        """
        Run one headset tick. Only valid while the node is not started.

        Raises:
            RuntimeError: If the background thread is running.
        """
        if self._running:
            raise RuntimeError("step() called while SimDeviceNode is running")
        self._tick()

    def _tick(self) -> None:
        with self._lock:
            pose = self._pose
            tracking = self._currently_tracking
            battery = self._battery_percent

        self._frame_count += 1
        self._link.publish_frame_data(
            self._frame_count, time.monotonic() - self._start_time, pose
        )

        self._tracking.update(tracking)
        if (self._frame_count - 1) % self._device_every == 0:
            self._link.publish_device_data(self._tracking.lost_counter, tracking, battery)

        self._processor.process_commands()

    def start(self) -> None:
        """Start the device node (spawns background thread)."""
        if self._running:
            return
        self._running = True
        self._thread = Thread(target=self._run, daemon=True, name="SimDeviceNode")
        self._thread.start()
        print(f"[SimDeviceNode] Started ({self._config.frame_data_hz:.0f} Hz)")

    def stop(self) -> None:
        """Stop the device node."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None
        print("[SimDeviceNode] Stopped")

    def close(self) -> None:
        """Stop the node and release its fabric subscriptions."""
        if self._running:
            self.stop()
        self._link.close()

    def _run(self) -> None:
        """Main loop: tick at the frame rate."""
        while self._running:
            loop_start = time.monotonic()
            self._tick()
            elapsed = time.monotonic() - loop_start
            if elapsed < self._interval:
                time.sleep(self._interval - elapsed)

    @property
    def is_running(self) -> bool:
        """Check if device node is running."""
        return self._running
