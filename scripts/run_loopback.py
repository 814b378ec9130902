"""Loopback demo: robot control loop and simulated headset on one fabric.

Runs the Controller at a fixed rate against a SimDeviceNode, issues a pose
reset, prints link status, then simulates a headset stall so the link goes
stale.

Usage:
    python scripts/run_loopback.py
    python scripts/run_loopback.py --config config/questnav.yaml --rate 50
    python scripts/run_loopback.py --pose 3.0 2.0 90 --duration 3
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path

from pubsub import pub

from questnav import LocalFabric, Pose2D, QuestNav, SimDeviceNode, Topics, load_questnav_config


def main():
    parser = argparse.ArgumentParser(description="QuestNav loopback demo")
    parser.add_argument("--config", type=Path, default=None, help="Link config YAML")
    parser.add_argument("--rate", type=float, default=50.0, help="Control loop rate (Hz)")
    parser.add_argument("--duration", type=float, default=2.0, help="Seconds to run before the stall")
    parser.add_argument(
        "--pose", type=float, nargs=3, default=[1.0, 2.0, 90.0], metavar=("X", "Y", "DEG"),
        help="Pose reset target",
    )
    args = parser.parse_args()

    config = load_questnav_config(args.config)
    fabric = LocalFabric()
    device = SimDeviceNode(fabric, config)
    questnav = QuestNav(fabric, config)

    # Note: Must use named function, not lambda - pypubsub uses weak refs
    def on_failure(response):
        print(f"[Demo] Pose reset {response.command_id} rejected: {response.error_message}")
    pub.subscribe(on_failure, Topics.COMMAND_FAILURE)

    def on_success(response):
        print(f"[Demo] Pose reset {response.command_id} acknowledged")
    pub.subscribe(on_success, Topics.COMMAND_SUCCESS)

    device.start()
    period = 1.0 / args.rate

    def run_for(seconds: float) -> None:
        end = time.monotonic() + seconds
        last_report = 0.0
        while time.monotonic() < end:
            loop_start = time.monotonic()
            questnav.command_periodic()
            if loop_start - last_report >= 0.5:
                last_report = loop_start
                pose = questnav.get_pose()
                print(
                    f"[Demo] connected={questnav.is_connected()} "
                    f"latency={questnav.get_latency():.1f} ms "
                    f"frame={questnav.get_frame_count()} "
                    f"pose=({pose.x:.2f}, {pose.y:.2f}, {pose.heading:.1f}) "
                    f"battery={questnav.get_battery_percent()} "
                    f"tracking={questnav.is_tracking()}"
                )
            sleep_for = period - (time.monotonic() - loop_start)
            if sleep_for > 0:
                time.sleep(sleep_for)

    try:
        # Wait for first telemetry before resetting
        run_for(0.2)
        questnav.set_pose(Pose2D(*args.pose))
        run_for(args.duration)

        # Out-of-field reset is refused by the headset
        questnav.set_pose(Pose2D(-5.0, 0.0, 0.0))
        run_for(0.5)

        print("[Demo] Stalling headset...")
        device.stop()
        run_for(1.0)
    finally:
        device.close()
        fabric.close()
        pub.unsubscribe(on_failure, Topics.COMMAND_FAILURE)
        pub.unsubscribe(on_success, Topics.COMMAND_SUCCESS)


if __name__ == "__main__":
    main()
