"""In-process fabric built on pypubsub.

Both peers of a loopback setup (tests, simulation, single-process demos)
share one LocalFabric. Every publish is sent as a pypubsub message; the
fabric's own listener stores it into the topic's last-value cell, and any
TopicQueue subscribed to the same topic appends it to its queue.
"""

from __future__ import annotations

import itertools
import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict, List, Optional

from pubsub import pub

from questnav.core.types import TimestampedValue
from questnav.fabric.base import Fabric

# Distinguishes pypubsub topics of fabrics living in the same process
_fabric_ids = itertools.count(1)


def monotonic_clock_us() -> Callable[[], int]:
    """Server clock: microseconds since the clock was created."""
    epoch = time.monotonic_ns()

    def now() -> int:
        return (time.monotonic_ns() - epoch) // 1000

    return now


class LocalTopicQueue:
    """Send-all subscriber on one LocalFabric topic."""

    def __init__(self, pubsub_topic: str, depth: int) -> None:
        self._pubsub_topic = pubsub_topic
        self._values: Deque[TimestampedValue] = deque(maxlen=depth)
        self._lock = Lock()
        self._closed = False
        pub.subscribe(self._on_publish, pubsub_topic)

    def _on_publish(self, path: str, stamped: TimestampedValue) -> None:
        with self._lock:
            self._values.append(stamped)

    def read_queue(self) -> List[TimestampedValue]:
        with self._lock:
            values = list(self._values)
            self._values.clear()
        return values

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if pub.isSubscribed(self._on_publish, self._pubsub_topic):
            pub.unsubscribe(self._on_publish, self._pubsub_topic)


class LocalFabric(Fabric):
    """
    Last-value fabric living in this process.

    Usage:
        fabric = LocalFabric()
        fabric.publish("/QuestNav/frameData", data)
        stamped = fabric.get("/QuestNav/frameData")  # value + server_time

        # Deterministic time for tests
        fabric = LocalFabric(clock=lambda: fake_now_us)
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        """
        Args:
            clock: Returns server time in microseconds. Defaults to a
                monotonic clock starting at zero.
        """
        self._clock = clock or monotonic_clock_us()
        self._prefix = f"fabric{next(_fabric_ids)}"
        self._cells: Dict[str, TimestampedValue] = {}
        self._pubsub_topics: Dict[str, str] = {}
        self._queues: List[LocalTopicQueue] = []
        self._lock = Lock()

    def _pubsub_topic(self, path: str) -> str:
        """pypubsub topic carrying ``path``; subscribes the cell listener on first use."""
        with self._lock:
            name = self._pubsub_topics.get(path)
            if name is not None:
                return name
            name = f"{self._prefix}.topic{len(self._pubsub_topics)}"
            self._pubsub_topics[path] = name
            pub.subscribe(self._on_publish, name)
        return name

    def _on_publish(self, path: str, stamped: TimestampedValue) -> None:
        """Store the newest value into the topic's cell."""
        with self._lock:
            self._cells[path] = stamped

    def publish(self, topic: str, data: bytes) -> None:
        if not isinstance(data, bytes):
            raise TypeError(f"Expected bytes, got {type(data).__name__}")
        stamped = TimestampedValue(value=data, server_time=self._clock())
        pub.sendMessage(self._pubsub_topic(topic), path=topic, stamped=stamped)

    def get(self, topic: str) -> Optional[TimestampedValue]:
        with self._lock:
            return self._cells.get(topic)

    def now(self) -> int:
        return self._clock()

    def subscribe_queue(self, topic: str, depth: int = 20) -> LocalTopicQueue:
        queue = LocalTopicQueue(self._pubsub_topic(topic), depth)
        self._queues.append(queue)
        return queue

    def close(self) -> None:
        """
        Drop every value, listener and pypubsub topic this fabric created.

        The fabric starts over empty if it is published to again.
        """
        for queue in self._queues:
            queue.close()
        self._queues.clear()
        with self._lock:
            self._pubsub_topics.clear()
            self._cells.clear()
        # Removes the whole fabricN subtree along with its listeners
        pub.getDefaultTopicMgr().delTopic(self._prefix)

    @property
    def topics(self) -> List[str]:
        """Paths of all topics that currently hold a value."""
        with self._lock:
            return sorted(self._cells)


__all__ = ["LocalFabric", "LocalTopicQueue", "monotonic_clock_us"]
