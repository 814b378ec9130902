"""Abstract interface for the shared last-value pub/sub fabric.

The fabric exposes named topics. Each topic is a single versioned cell:
publishing overwrites the value and stamps it with the fabric's server
clock; reading returns whatever the cell currently holds. Nothing is
queued for ordinary readers and nothing is acknowledged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from questnav.core.types import TimestampedValue


@runtime_checkable
class TopicQueue(Protocol):
    """
    Subscriber that keeps every publish on a topic since the last read.

    The Device uses this for the request topic so that commands issued
    faster than its own tick rate are still seen (and can be answered as
    superseded) instead of silently overwritten.
    """

    def read_queue(self) -> List[TimestampedValue]:
        """Return all values published since the previous call, oldest first."""
        ...

    def close(self) -> None:
        """Stop collecting values."""
        ...


class Fabric(ABC):
    """Abstract base class for fabric clients."""

    @abstractmethod
    def publish(self, topic: str, data: bytes) -> None:
        """Overwrite the topic's value and stamp it with the server time."""
        ...

    @abstractmethod
    def get(self, topic: str) -> Optional[TimestampedValue]:
        """Non-blocking: current value of the topic, None if never published."""
        ...

    @abstractmethod
    def now(self) -> int:
        """Current fabric server time in microseconds."""
        ...

    @abstractmethod
    def subscribe_queue(self, topic: str, depth: int = 20) -> TopicQueue:
        """Create a send-all subscriber on ``topic`` keeping at most ``depth`` values."""
        ...

    def close(self) -> None:
        """Clean up resources."""
        pass
