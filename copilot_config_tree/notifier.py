# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Best-effort broadcast of configuration changes to subscribers."""

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ConfigUpdateMsg(Generic[T]):
    """A configuration change: the value replaced and the value now current."""

    old_config: Optional[T]
    new_config: T


class Subscription:
    """A subscriber handle owning a single-slot mailbox.

    At most one undelivered message is held; a newer message replaces it.
    Once closed, no further message is accepted. A message already waiting
    when the subscription closes can still be read.
    """

    def __init__(self, cancel: threading.Event):
        self._cancel = cancel
        self._cond = threading.Condition()
        self._pending: Any = None
        self._has_pending = False
        self._closed = False

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def offer(self, msg: ConfigUpdateMsg) -> bool:
        """Place a message in the mailbox without blocking.

        Returns:
            False if the subscription is closed or cancelled, True otherwise
        """
        with self._cond:
            if self._closed or self._cancel.is_set():
                return False
            self._pending = msg
            self._has_pending = True
            self._cond.notify_all()
            return True

    def get(self, timeout: Optional[float] = None) -> Optional[ConfigUpdateMsg]:
        """Take the pending message, waiting up to ``timeout`` seconds.

        Returns:
            The message, or None once closed with nothing pending or on timeout
        """
        with self._cond:
            self._cond.wait_for(lambda: self._has_pending or self._closed, timeout)
            if not self._has_pending:
                return None
            msg = self._pending
            self._pending = None
            self._has_pending = False
            return msg

    def wait_closed(self, timeout: Optional[float] = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._closed, timeout)

    def __iter__(self) -> Iterator[ConfigUpdateMsg]:
        while True:
            msg = self.get()
            if msg is None:
                return
            yield msg

    def _close(self) -> bool:
        with self._cond:
            if self._closed:
                return False
            self._closed = True
            self._cond.notify_all()
            return True


class ConfigUpdateNotifier:
    """Registry of subscriptions with non-blocking publish.

    Each subscription gets one daemon monitor thread that waits for its
    cancellation event and then removes and closes it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, cancel: threading.Event) -> Subscription:
        """Register a subscriber whose lifetime ends when ``cancel`` is set.

        Args:
            cancel: Event the caller sets to end the subscription

        Returns:
            The subscription handle to read messages from
        """
        subscription = Subscription(cancel)
        with self._lock:
            self._subscribers.append(subscription)

        monitor = threading.Thread(
            target=self._monitor,
            args=(subscription,),
            name="config-subscription-monitor",
            daemon=True,
        )
        monitor.start()
        return subscription

    def publish(self, msg: ConfigUpdateMsg) -> int:
        """Offer a message to every active subscriber.

        Returns:
            Number of subscribers the message was delivered to
        """
        with self._lock:
            subscribers = list(self._subscribers)

        delivered = 0
        for subscription in subscribers:
            if subscription.offer(msg):
                delivered += 1
        logger.debug(f"Published configuration update to {delivered} subscriber(s)")
        return delivered

    def _monitor(self, subscription: Subscription) -> None:
        subscription.cancel_event.wait()
        with self._lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)
        if subscription._close():
            logger.debug("Configuration subscription closed")
