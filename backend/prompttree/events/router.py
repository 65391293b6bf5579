"""Server-Sent Events stream of change notifications."""

import asyncio
from collections.abc import AsyncIterator
from uuid import uuid4

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from prompttree.events.notifier import ChangeNotifier, Subscription, format_sse

router = APIRouter(tags=["events"])

KEEPALIVE_SECONDS = 15.0


def get_notifier() -> ChangeNotifier:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("ChangeNotifier not initialized")


async def event_stream(
    notifier: ChangeNotifier,
    subscription: Subscription,
    *,
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Yield SSE frames for one subscription until it closes or falls behind.

    An inactive subscriber gets whatever was already queued, then the stream
    ends so the client reconnects and refetches.
    """
    try:
        while True:
            if not subscription.is_active and subscription.queue.empty():
                break
            try:
                event = await asyncio.wait_for(subscription.queue.get(), timeout=keepalive)
            except TimeoutError:
                yield ": ping\n\n"
                continue
            if event is None:
                break
            yield format_sse(event)
    finally:
        notifier.unregister(subscription.id)


@router.get("/events")
async def stream_events(
    notifier: ChangeNotifier = Depends(get_notifier),
) -> StreamingResponse:
    subscription = notifier.register(str(uuid4()))
    return StreamingResponse(
        event_stream(notifier, subscription),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
