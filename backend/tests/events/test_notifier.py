"""Tests for ChangeNotifier fan-out, overflow handling and the SSE generator."""

import json

import pytest

from prompttree.errors import PromptNotFoundError
from prompttree.events.notifier import (
    ChangeEvent,
    ChangeNotifier,
    EventType,
    SubscriberStatus,
    format_sse,
)
from prompttree.events.router import event_stream
from prompttree.prompts.schemas import (
    CreateNodeRequest,
    CreateNoteRequest,
    CreatePromptRequest,
    UpdatePromptRequest,
)


def _event(message: str = "m") -> ChangeEvent:
    return ChangeEvent(type=EventType.TREE_CHANGED, message=message, timestamp=0)


def _drain(subscription) -> list:
    items = []
    while not subscription.queue.empty():
        items.append(subscription.queue.get_nowait())
    return items


class TestRegistration:
    def test_register_and_unregister(self):
        notifier = ChangeNotifier(queue_size=4)
        sub = notifier.register("a")
        assert notifier.subscriber_count == 1
        assert sub.status is SubscriberStatus.ACTIVE

        notifier.unregister("a")
        assert notifier.subscriber_count == 0
        assert sub.status is SubscriberStatus.CLOSED
        # Closing leaves only the end-of-stream marker
        assert _drain(sub) == [None]

    def test_unregister_unknown_is_noop(self):
        notifier = ChangeNotifier()
        notifier.unregister("ghost")
        assert notifier.subscriber_count == 0

    def test_reregister_closes_previous(self):
        notifier = ChangeNotifier(queue_size=4)
        old = notifier.register("same")
        new = notifier.register("same")
        assert notifier.subscriber_count == 1
        assert old.status is SubscriberStatus.CLOSED
        assert new.is_active

    @pytest.mark.parametrize("size", [0, -1])
    def test_queue_must_be_bounded(self, size):
        with pytest.raises(ValueError, match="queue_size"):
            ChangeNotifier(queue_size=size)


class TestBroadcast:
    def test_no_subscribers(self):
        assert ChangeNotifier().broadcast(_event()) == 0

    def test_every_subscriber_receives(self):
        notifier = ChangeNotifier(queue_size=4)
        subs = [notifier.register(str(i)) for i in range(3)]

        assert notifier.broadcast(_event("hello")) == 3
        for sub in subs:
            assert [e.message for e in _drain(sub)] == ["hello"]

    def test_full_queue_marks_only_that_subscriber_inactive(self):
        notifier = ChangeNotifier(queue_size=2)
        slow = notifier.register("slow")
        fast = notifier.register("fast")

        notifier.broadcast(_event("1"))
        notifier.broadcast(_event("2"))
        _drain(fast)

        delivered = notifier.broadcast(_event("3"))

        assert delivered == 1
        assert slow.status is SubscriberStatus.INACTIVE
        assert [e.message for e in _drain(slow)] == ["1", "2"]
        assert [e.message for e in _drain(fast)] == ["3"]

    def test_inactive_subscriber_gets_nothing_more(self):
        notifier = ChangeNotifier(queue_size=1)
        sub = notifier.register("s")
        notifier.broadcast(_event("kept"))
        notifier.broadcast(_event("dropped"))
        _drain(sub)

        assert notifier.broadcast(_event("later")) == 0
        assert sub.queue.empty()

    def test_helper_payloads(self):
        notifier = ChangeNotifier(queue_size=8)
        sub = notifier.register("s")

        notifier.tree_changed()
        notifier.prompt_changed(3)
        notifier.node_changed(3)
        notifier.note_changed(3)

        events = _drain(sub)
        assert [e.type for e in events] == [
            EventType.TREE_CHANGED,
            EventType.PROMPT_CHANGED,
            EventType.NODE_CHANGED,
            EventType.NOTE_CHANGED,
        ]
        assert events[0].prompt_id is None
        assert events[0].message == "Tree structure has been updated"
        assert events[1].message == "Prompt 3 has been updated"
        assert events[2].message == "Nodes for prompt 3 have been updated"
        assert events[3].message == "Notes for prompt 3 have been updated"
        assert all(e.timestamp > 0 for e in events)


class TestFormatSse:
    def test_tree_changed_omits_prompt_id(self):
        frame = format_sse(_event("x"))
        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        payload = json.loads(frame[len("data: "):])
        assert payload == {"type": "tree_changed", "message": "x", "timestamp": 0}

    def test_prompt_event_includes_prompt_id(self):
        event = ChangeEvent(
            type=EventType.NOTE_CHANGED, prompt_id=9, message="m", timestamp=1
        )
        payload = json.loads(format_sse(event)[len("data: "):])
        assert payload["prompt_id"] == 9
        assert payload["type"] == "note_changed"


class TestEventStream:
    async def test_yields_frames_for_events(self):
        notifier = ChangeNotifier(queue_size=4)
        sub = notifier.register("s")
        stream = event_stream(notifier, sub, keepalive=1.0)

        notifier.prompt_changed(5)
        frame = await anext(stream)
        assert json.loads(frame[len("data: "):])["prompt_id"] == 5
        await stream.aclose()
        assert notifier.subscriber_count == 0

    async def test_keepalive_ping(self):
        notifier = ChangeNotifier(queue_size=4)
        sub = notifier.register("s")
        stream = event_stream(notifier, sub, keepalive=0.01)

        assert await anext(stream) == ": ping\n\n"
        await stream.aclose()

    async def test_ends_after_unregister(self):
        notifier = ChangeNotifier(queue_size=4)
        sub = notifier.register("s")
        notifier.unregister("s")

        frames = [frame async for frame in event_stream(notifier, sub, keepalive=1.0)]
        assert frames == []

    async def test_inactive_subscriber_drains_then_ends(self):
        notifier = ChangeNotifier(queue_size=2)
        sub = notifier.register("s")
        for i in range(3):
            notifier.broadcast(_event(str(i)))
        assert sub.status is SubscriberStatus.INACTIVE

        frames = [frame async for frame in event_stream(notifier, sub, keepalive=1.0)]
        messages = [json.loads(f[len("data: "):])["message"] for f in frames]
        assert messages == ["0", "1"]
        assert notifier.subscriber_count == 0


class TestServiceNotifications:
    async def test_prompt_crud_events(self, prompt_service, notifier):
        sub = notifier.register("watcher")

        prompt = await prompt_service.create_prompt(CreatePromptRequest(title="T"))
        await prompt_service.update_prompt(prompt.id, UpdatePromptRequest(title="U"))
        await prompt_service.create_node(prompt.id, CreateNodeRequest(name="n"))
        await prompt_service.create_note(prompt.id, CreateNoteRequest(content="c"))
        await prompt_service.delete_prompt(prompt.id)

        events = _drain(sub)
        assert [e.type for e in events] == [
            EventType.TREE_CHANGED,
            EventType.PROMPT_CHANGED,
            EventType.NODE_CHANGED,
            EventType.NOTE_CHANGED,
            EventType.TREE_CHANGED,
        ]
        assert events[1].prompt_id == prompt.id

    async def test_failed_mutation_sends_nothing(self, prompt_service, notifier):
        sub = notifier.register("watcher")
        with pytest.raises(PromptNotFoundError):
            await prompt_service.delete_prompt(12345)
        assert sub.queue.empty()
