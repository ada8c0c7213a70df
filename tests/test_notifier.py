# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for configuration change notification."""

import dataclasses
import threading

import pytest
from copilot_config_tree.notifier import ConfigUpdateMsg, ConfigUpdateNotifier


@pytest.fixture
def notifier():
    return ConfigUpdateNotifier()


class TestConfigUpdateMsg:
    """Tests for the update message."""

    def test_is_immutable(self):
        """Test messages cannot be modified."""
        msg = ConfigUpdateMsg(old_config={"port": 1}, new_config={"port": 2})

        with pytest.raises(dataclasses.FrozenInstanceError):
            msg.new_config = {}


class TestSubscription:
    """Tests for subscription delivery and lifecycle."""

    def test_publish_delivers(self, notifier):
        """Test an active subscriber receives a published message."""
        subscription = notifier.subscribe(threading.Event())
        msg = ConfigUpdateMsg(1, 2)

        assert notifier.publish(msg) == 1
        assert subscription.get(timeout=1.0) is msg

    def test_latest_message_wins(self, notifier):
        """Test an undelivered message is replaced, not queued."""
        subscription = notifier.subscribe(threading.Event())
        first = ConfigUpdateMsg(1, 2)
        second = ConfigUpdateMsg(2, 3)

        notifier.publish(first)
        notifier.publish(second)

        assert subscription.get(timeout=1.0) is second
        assert subscription.get(timeout=0.05) is None

    def test_every_subscriber_receives(self, notifier):
        """Test publish fans out to all subscribers."""
        subscriptions = [notifier.subscribe(threading.Event()) for _ in range(3)]
        msg = ConfigUpdateMsg(None, 1)

        assert notifier.publish(msg) == 3
        assert all(s.get(timeout=1.0) is msg for s in subscriptions)

    def test_cancel_then_publish(self, notifier):
        """Test a cancelled subscriber gets nothing and stays closed."""
        cancel = threading.Event()
        subscription = notifier.subscribe(cancel)

        cancel.set()
        delivered = notifier.publish(ConfigUpdateMsg(1, 2))

        assert delivered == 0
        assert subscription.wait_closed(timeout=2.0)
        assert subscription.closed
        assert subscription.get() is None
        assert list(subscription) == []
        assert notifier.subscriber_count == 0

    def test_closed_exactly_once(self, notifier):
        """Test the monitor closes the subscription and a second close is a no-op."""
        cancel = threading.Event()
        subscription = notifier.subscribe(cancel)

        cancel.set()
        assert subscription.wait_closed(timeout=2.0)
        assert subscription._close() is False

    def test_pending_message_readable_after_close(self, notifier):
        """Test iteration drains a message published before cancellation."""
        cancel = threading.Event()
        subscription = notifier.subscribe(cancel)
        msg = ConfigUpdateMsg(1, 2)

        notifier.publish(msg)
        cancel.set()
        assert subscription.wait_closed(timeout=2.0)

        assert list(subscription) == [msg]

    def test_iteration_in_consumer_thread(self, notifier):
        """Test a consumer loop ends when the subscription is cancelled."""
        cancel = threading.Event()
        subscription = notifier.subscribe(cancel)
        received = []
        consumed = threading.Event()

        def consume():
            for msg in subscription:
                received.append(msg)
                consumed.set()

        consumer = threading.Thread(target=consume, daemon=True)
        consumer.start()

        msg = ConfigUpdateMsg(1, 2)
        notifier.publish(msg)
        assert consumed.wait(timeout=2.0)
        cancel.set()
        consumer.join(timeout=2.0)

        assert not consumer.is_alive()
        assert received == [msg]

    def test_other_subscribers_unaffected_by_cancel(self, notifier):
        """Test cancelling one subscription leaves the others active."""
        cancel = threading.Event()
        cancelled = notifier.subscribe(cancel)
        active = notifier.subscribe(threading.Event())

        cancel.set()
        assert cancelled.wait_closed(timeout=2.0)

        assert notifier.publish(ConfigUpdateMsg(1, 2)) == 1
        assert active.get(timeout=1.0) is not None
        assert not active.closed
