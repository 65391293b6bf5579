"""Change notification: in-process broadcaster and its SSE stream."""

from prompttree.events.notifier import (
    ChangeEvent,
    ChangeNotifier,
    EventType,
    SubscriberStatus,
    Subscription,
    format_sse,
)

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "EventType",
    "SubscriberStatus",
    "Subscription",
    "format_sse",
]
