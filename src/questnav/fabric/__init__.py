"""Fabric abstractions."""

from questnav.fabric.base import Fabric, TopicQueue
from questnav.fabric.local import LocalFabric, LocalTopicQueue, monotonic_clock_us
from questnav.fabric.topic import (
    MessagePublisher,
    MessageQueueSubscriber,
    MessageSubscriber,
    TimestampedMessage,
)

__all__ = [
    "Fabric",
    "LocalFabric",
    "LocalTopicQueue",
    "MessagePublisher",
    "MessageQueueSubscriber",
    "MessageSubscriber",
    "TimestampedMessage",
    "TopicQueue",
    "monotonic_clock_us",
]
