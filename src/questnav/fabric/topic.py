"""Typed publishers and subscribers over raw fabric topics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, Protocol, Type, TypeVar

from questnav.core.topics import topic_path
from questnav.core.types import TimestampedValue
from questnav.core.wire import WireFormatError
from questnav.fabric.base import Fabric, TopicQueue


class Message(Protocol):
    def serialize(self) -> bytes:
        ...


M = TypeVar("M")


@dataclass(frozen=True)
class TimestampedMessage(Generic[M]):
    """Decoded topic value and the server time of its publish."""

    value: M
    server_time: int  # microseconds, fabric server clock


class MessagePublisher(Generic[M]):
    """Publishes serialized messages on one topic."""

    def __init__(self, fabric: Fabric, table: str, topic: str) -> None:
        self._fabric = fabric
        self._path = topic_path(table, topic)

    @property
    def path(self) -> str:
        return self._path

    def set(self, message: Message) -> None:
        """Overwrite the topic with ``message`` in a single fabric write."""
        self._fabric.publish(self._path, message.serialize())


class MessageSubscriber(Generic[M]):
    """
    Reads the current value of one topic, decoded as ``message_type``.

    All reads are snapshots of the fabric cell; nothing blocks. A cell that
    cannot be decoded is reported once and then read as "no data".
    """

    def __init__(self, fabric: Fabric, table: str, topic: str, message_type: Type[M]) -> None:
        self._fabric = fabric
        self._path = topic_path(table, topic)
        self._type = message_type
        # Last decoded cell, so repeated polls of an unchanged value are cheap
        self._cached_raw: Optional[TimestampedValue] = None
        self._cached: Optional[TimestampedMessage[M]] = None

    @property
    def path(self) -> str:
        return self._path

    def get_atomic(self) -> Optional[TimestampedMessage[M]]:
        """Current value with its publish time, or None if unavailable."""
        stamped = self._fabric.get(self._path)
        if stamped is None:
            return None
        if stamped is self._cached_raw:
            return self._cached

        self._cached_raw = stamped
        self._cached = _decode(self._type, self._path, stamped)
        return self._cached

    def get(self) -> Optional[M]:
        """Current value, or None if unavailable."""
        stamped = self.get_atomic()
        return stamped.value if stamped is not None else None

    def last_change(self) -> Optional[int]:
        """Server time (us) of the last publish, or None if never published."""
        stamped = self._fabric.get(self._path)
        return stamped.server_time if stamped is not None else None


class MessageQueueSubscriber(Generic[M]):
    """Send-all subscriber returning every decoded value since the last read."""

    def __init__(
        self,
        fabric: Fabric,
        table: str,
        topic: str,
        message_type: Type[M],
        depth: int = 20,
    ) -> None:
        self._path = topic_path(table, topic)
        self._type = message_type
        self._queue: TopicQueue = fabric.subscribe_queue(self._path, depth)

    def read_queue_values(self) -> List[TimestampedMessage[M]]:
        values = []
        for stamped in self._queue.read_queue():
            decoded = _decode(self._type, self._path, stamped)
            if decoded is not None:
                values.append(decoded)
        return values

    def close(self) -> None:
        self._queue.close()


def _decode(message_type: Type[M], path: str, stamped: TimestampedValue) -> Optional[TimestampedMessage[M]]:
    try:
        value = message_type.deserialize(stamped.value)
    except WireFormatError as e:
        print(f"[Fabric] Dropping malformed value on {path}: {e}")
        return None
    return TimestampedMessage(value=value, server_time=stamped.server_time)
