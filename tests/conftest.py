"""
Pytest configuration for questnav tests.
"""

import pytest
from pubsub import pub

from questnav.core.topics import Topics
from questnav.fabric.local import LocalFabric


class FakeClock:
    """Fabric server clock under test control (microseconds)."""

    def __init__(self, start_us: int = 1_000_000):
        self.now_us = start_us

    def __call__(self) -> int:
        return self.now_us

    def advance_ms(self, ms: float) -> None:
        self.now_us += int(ms * 1000)


class EventRecorder:
    """Collects correlator and device events published via pypubsub."""

    def __init__(self):
        self.failures = []
        self.successes = []
        self.pose_resets = []

    def on_failure(self, response):
        self.failures.append(response)

    def on_success(self, response):
        self.successes.append(response)

    def on_pose_reset(self, pose):
        self.pose_resets.append(pose)


@pytest.fixture
def clock():
    """Fixture for a manually advanced fabric clock."""
    return FakeClock()


@pytest.fixture
def fabric(clock):
    """Fixture for an in-process fabric driven by the fake clock."""
    fabric = LocalFabric(clock=clock)
    yield fabric
    fabric.close()


@pytest.fixture
def events():
    """Fixture recording command success/failure and pose reset events."""
    recorder = EventRecorder()
    pub.subscribe(recorder.on_failure, Topics.COMMAND_FAILURE)
    pub.subscribe(recorder.on_success, Topics.COMMAND_SUCCESS)
    pub.subscribe(recorder.on_pose_reset, Topics.POSE_RESET)
    yield recorder
    pub.unsubscribe(recorder.on_failure, Topics.COMMAND_FAILURE)
    pub.unsubscribe(recorder.on_success, Topics.COMMAND_SUCCESS)
    pub.unsubscribe(recorder.on_pose_reset, Topics.POSE_RESET)
