"""
Tests for the in-process last-value fabric and typed topic access.
"""

import pytest
from pubsub import pub

from questnav.core.messages import CommandResponse
from questnav.fabric.base import Fabric, TopicQueue
from questnav.fabric.local import LocalFabric
from questnav.fabric.topic import MessagePublisher, MessageQueueSubscriber, MessageSubscriber


class TestLocalFabric:
    """Test last-value cell semantics."""

    def test_is_fabric(self, fabric):
        assert isinstance(fabric, Fabric)

    def test_never_published(self, fabric):
        assert fabric.get("/QuestNav/frameData") is None

    def test_last_value_wins(self, fabric, clock):
        fabric.publish("/t/a", b"one")
        clock.advance_ms(5)
        fabric.publish("/t/a", b"two")
        stamped = fabric.get("/t/a")
        assert stamped.value == b"two"
        assert stamped.server_time == clock.now_us

    def test_read_does_not_consume(self, fabric):
        fabric.publish("/t/a", b"x")
        assert fabric.get("/t/a") == fabric.get("/t/a")

    def test_topics_are_independent(self, fabric):
        fabric.publish("/t/a", b"a")
        fabric.publish("/t/b", b"b")
        assert fabric.get("/t/a").value == b"a"
        assert fabric.get("/t/b").value == b"b"
        assert fabric.topics == ["/t/a", "/t/b"]

    def test_fabrics_are_isolated(self, fabric):
        other = LocalFabric()
        try:
            other.publish("/t/a", b"other")
            assert fabric.get("/t/a") is None
        finally:
            other.close()

    def test_rejects_non_bytes(self, fabric):
        with pytest.raises(TypeError):
            fabric.publish("/t/a", "text")

    def test_close_removes_pubsub_topics(self):
        fabric = LocalFabric()
        fabric.publish("/t/a", b"a")
        queue = fabric.subscribe_queue("/t/b")
        prefix = fabric._prefix
        topic_mgr = pub.getDefaultTopicMgr()
        assert topic_mgr.getTopic(prefix, okIfNone=True) is not None

        fabric.close()
        assert topic_mgr.getTopic(prefix, okIfNone=True) is None
        assert fabric.get("/t/a") is None
        assert fabric.topics == []
        queue.close()

    def test_publish_after_close(self, fabric):
        fabric.publish("/t/a", b"old")
        fabric.close()
        fabric.publish("/t/a", b"new")
        assert fabric.get("/t/a").value == b"new"
        queue = fabric.subscribe_queue("/t/a")
        fabric.publish("/t/a", b"queued")
        assert [v.value for v in queue.read_queue()] == [b"queued"]

    def test_default_clock_is_monotonic(self):
        fabric = LocalFabric()
        try:
            first = fabric.now()
            assert fabric.now() >= first >= 0
        finally:
            fabric.close()


class TestTopicQueue:
    """Test send-all queue subscribers."""

    def test_queue_keeps_every_publish(self, fabric):
        queue = fabric.subscribe_queue("/t/req")
        assert isinstance(queue, TopicQueue)
        fabric.publish("/t/req", b"1")
        fabric.publish("/t/req", b"2")
        assert [v.value for v in queue.read_queue()] == [b"1", b"2"]
        assert queue.read_queue() == []

    def test_queue_depth_drops_oldest(self, fabric):
        queue = fabric.subscribe_queue("/t/req", depth=2)
        for data in (b"1", b"2", b"3"):
            fabric.publish("/t/req", data)
        assert [v.value for v in queue.read_queue()] == [b"2", b"3"]

    def test_queue_sees_only_later_publishes(self, fabric):
        fabric.publish("/t/req", b"before")
        queue = fabric.subscribe_queue("/t/req")
        assert queue.read_queue() == []
        assert fabric.get("/t/req").value == b"before"

    def test_closed_queue_stops_collecting(self, fabric):
        queue = fabric.subscribe_queue("/t/req")
        queue.close()
        fabric.publish("/t/req", b"1")
        assert queue.read_queue() == []


class TestTypedTopics:
    """Test typed publishers and subscribers."""

    def test_publish_and_get(self, fabric, clock):
        publisher = MessagePublisher(fabric, "QuestNav", "response")
        subscriber = MessageSubscriber(fabric, "QuestNav", "response", CommandResponse)
        assert publisher.path == "/QuestNav/response"
        assert subscriber.get() is None
        assert subscriber.last_change() is None

        publisher.set(CommandResponse(command_id=4, success=True))
        stamped = subscriber.get_atomic()
        assert stamped.value == CommandResponse(command_id=4, success=True)
        assert stamped.server_time == clock.now_us
        assert subscriber.last_change() == clock.now_us

    def test_malformed_value_reads_as_no_data(self, fabric, capsys):
        subscriber = MessageSubscriber(fabric, "QuestNav", "response", CommandResponse)
        fabric.publish("/QuestNav/response", b"\x1a\x05ab")
        assert subscriber.get() is None
        assert subscriber.get() is None
        output = capsys.readouterr().out
        assert output.count("Dropping malformed value") == 1
        # Liveness still visible
        assert subscriber.last_change() is not None

    def test_queue_subscriber_decodes(self, fabric):
        queue = MessageQueueSubscriber(fabric, "QuestNav", "response", CommandResponse)
        publisher = MessagePublisher(fabric, "QuestNav", "response")
        publisher.set(CommandResponse(command_id=1, success=True))
        fabric.publish("/QuestNav/response", b"\x0a\x00")
        publisher.set(CommandResponse(command_id=2, success=False, error_message="no"))
        values = [v.value.command_id for v in queue.read_queue_values()]
        assert values == [1, 2]
        queue.close()
