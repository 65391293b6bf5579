"""In-process change notifier: fans change events out to stream subscribers.

Each subscriber owns a bounded queue. Broadcasting never waits: when a
subscriber's queue is full the event is dropped for it and the subscriber
is marked inactive, so one slow client cannot hold up a mutation.
"""

import asyncio
import logging
import time
from enum import StrEnum

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 256


class EventType(StrEnum):
    TREE_CHANGED = "tree_changed"
    PROMPT_CHANGED = "prompt_changed"
    NODE_CHANGED = "node_changed"
    NOTE_CHANGED = "note_changed"


class ChangeEvent(BaseModel):
    type: EventType
    prompt_id: int | None = None
    message: str
    timestamp: int


class SubscriberStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"  # queue overflowed; receives nothing further
    CLOSED = "closed"


class Subscription:
    """One subscriber's outbound queue. ``None`` in the queue marks end of stream."""

    def __init__(self, subscriber_id: str, maxsize: int) -> None:
        self.id = subscriber_id
        self.queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=maxsize)
        self.status = SubscriberStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is SubscriberStatus.ACTIVE

    def offer(self, event: ChangeEvent) -> bool:
        """Enqueue without waiting. On overflow mark inactive and return False."""
        if not self.is_active:
            return False
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.status = SubscriberStatus.INACTIVE
            return False
        return True

    def close(self) -> None:
        self.status = SubscriberStatus.CLOSED
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(None)


class ChangeNotifier:
    """Registry of subscriptions plus the broadcast helpers.

    All methods are synchronous and run on the event loop, so map updates
    never interleave. A broadcast iterates over a snapshot of the map.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        if queue_size < 1:
            raise ValueError(f"queue_size must be at least 1, got {queue_size}")
        self._queue_size = queue_size
        self._subscribers: dict[str, Subscription] = {}

    def register(self, subscriber_id: str) -> Subscription:
        subscription = Subscription(subscriber_id, self._queue_size)
        previous = self._subscribers.pop(subscriber_id, None)
        self._subscribers[subscriber_id] = subscription
        if previous is not None:
            previous.close()
        logger.info("Subscriber registered: %s", subscriber_id)
        return subscription

    def unregister(self, subscriber_id: str) -> None:
        subscription = self._subscribers.pop(subscriber_id, None)
        if subscription is not None:
            subscription.close()
            logger.info("Subscriber unregistered: %s", subscriber_id)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def broadcast(self, event: ChangeEvent) -> int:
        """Offer the event to every active subscriber. Returns how many accepted it."""
        delivered = 0
        for subscription in list(self._subscribers.values()):
            if not subscription.is_active:
                continue
            if subscription.offer(event):
                delivered += 1
            else:
                logger.warning(
                    "Subscriber %s queue full, marked inactive", subscription.id
                )
        return delivered

    def tree_changed(self) -> None:
        self.broadcast(ChangeEvent(
            type=EventType.TREE_CHANGED,
            message="Tree structure has been updated",
            timestamp=int(time.time()),
        ))

    def prompt_changed(self, prompt_id: int) -> None:
        self.broadcast(ChangeEvent(
            type=EventType.PROMPT_CHANGED,
            prompt_id=prompt_id,
            message=f"Prompt {prompt_id} has been updated",
            timestamp=int(time.time()),
        ))

    def node_changed(self, prompt_id: int) -> None:
        self.broadcast(ChangeEvent(
            type=EventType.NODE_CHANGED,
            prompt_id=prompt_id,
            message=f"Nodes for prompt {prompt_id} have been updated",
            timestamp=int(time.time()),
        ))

    def note_changed(self, prompt_id: int) -> None:
        self.broadcast(ChangeEvent(
            type=EventType.NOTE_CHANGED,
            prompt_id=prompt_id,
            message=f"Notes for prompt {prompt_id} have been updated",
            timestamp=int(time.time()),
        ))


def format_sse(event: ChangeEvent) -> str:
    """Render an event as a Server-Sent Events data frame."""
    return f"data: {event.model_dump_json(exclude_none=True)}\n\n"
