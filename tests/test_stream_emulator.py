"""Tests for the emulated stream state machines."""

from __future__ import annotations

import json

import pytest

from workers_gateway.core.sse import DONE_FRAME, DONE_SENTINEL, SSEDecoder
from workers_gateway.openai.stream_emulator import (
    ChatCompletionStreamEmulator,
    PacedStreamEmulator,
    ReplayCursor,
    ResponsesStreamEmulator,
    StreamState,
)
from workers_gateway.testing import assert_chat_chunks_valid, assert_responses_sse_valid
from workers_gateway.types.responses import EVENT_OUTPUT_TEXT_DELTA, STREAM_EVENT_ORDER


async def collect_frames(emulator) -> list[bytes]:
    return [frame async for frame in emulator.stream()]


def decode_events(frames: list[bytes]) -> tuple[list[dict], bool]:
    decoder = SSEDecoder()
    events = []
    saw_done = False
    for frame in frames:
        for event in decoder.feed(frame):
            if event.data == DONE_SENTINEL:
                saw_done = True
            else:
                events.append(json.loads(event.data))
    return events, saw_done


class DisconnectAfter:
    """Disconnect checker that reports a closed channel after N checks."""

    def __init__(self, checks: int) -> None:
        self.remaining = checks
        self.calls = 0

    async def __call__(self) -> bool:
        self.calls += 1
        if self.remaining <= 0:
            return True
        self.remaining -= 1
        return False


class TestReplayCursor:
    def test_slices(self):
        cursor = ReplayCursor("hello world", 4)
        slices = []
        while not cursor.exhausted:
            slices.append(cursor.next_slice())
        assert slices == ["hell", "o wo", "rld"]
        assert cursor.slice_count() == 3

    def test_empty_text(self):
        cursor = ReplayCursor("", 4)
        assert cursor.exhausted
        assert cursor.slice_count() == 0

    def test_slice_width_must_be_positive(self):
        with pytest.raises(ValueError):
            ReplayCursor("abc", 0)


class TestEmulatorValidation:
    def test_base_emulator_is_abstract(self):
        with pytest.raises(TypeError):
            PacedStreamEmulator("m", "text")  # type: ignore[abstract]

    def test_subclass_without_advance_fails_at_construction(self):
        class Incomplete(PacedStreamEmulator):
            pass

        with pytest.raises(TypeError):
            Incomplete("m", "text")  # type: ignore[abstract]

    @pytest.mark.parametrize("delay", [-0.1, float("inf"), float("nan")])
    def test_rejects_bad_pacing_delay(self, delay):
        with pytest.raises(ValueError):
            ChatCompletionStreamEmulator("m", "text", pacing_delay=delay)


class TestChatCompletionStream:
    @pytest.mark.asyncio
    async def test_replays_text(self):
        emulator = ChatCompletionStreamEmulator("gpt-4o", "hello world", pacing_delay=0)
        frames = await collect_frames(emulator)

        assert frames[-1] == DONE_FRAME
        events, saw_done = decode_events(frames)
        assert assert_chat_chunks_valid(events, saw_done) == "hello world"
        assert len(events) == 4
        assert events[0]["choices"][0]["delta"] == {"role": "assistant", "content": "hell"}
        assert all(event["model"] == "gpt-4o" for event in events)
        assert emulator.state is StreamState.DONE

    @pytest.mark.asyncio
    async def test_empty_text(self):
        frames = await collect_frames(ChatCompletionStreamEmulator("m", "", pacing_delay=0))
        events, saw_done = decode_events(frames)
        assert saw_done
        assert len(events) == 1
        assert events[0]["choices"][0]["finish_reason"] == "stop"

    @pytest.mark.asyncio
    async def test_disconnect_stops_stream(self):
        checker = DisconnectAfter(1)
        emulator = ChatCompletionStreamEmulator(
            "m", "abcdefghijkl", pacing_delay=0, disconnect_checker=checker
        )
        frames = await collect_frames(emulator)

        assert emulator.state is StreamState.ABORTED
        assert DONE_FRAME not in frames
        events, _ = decode_events(frames)
        assert [event["choices"][0]["delta"]["content"] for event in events] == ["abcd", "efgh"]


class TestResponsesStream:
    @pytest.mark.asyncio
    async def test_lifecycle(self):
        emulator = ResponsesStreamEmulator(
            "gpt-4o",
            "hello world",
            usage={"prompt_tokens": 7, "completion_tokens": 2},
            pacing_delay=0,
        )
        frames = await collect_frames(emulator)
        events, saw_done = decode_events(frames)

        assert not saw_done
        assert assert_responses_sse_valid(events) == "hello world"
        assert [e["delta"] for e in events if e["type"] == EVENT_OUTPUT_TEXT_DELTA] == [
            "hell", "o wo", "rld",
        ]
        assert [e["sequence_number"] for e in events] == list(range(1, len(events) + 1))

        created = events[0]["response"]
        assert created["status"] == "in_progress"
        assert created["output"] == []

        completed = events[-1]["response"]
        assert completed["status"] == "completed"
        assert completed["output"][0]["content"][0]["text"] == "hello world"
        assert completed["usage"]["input_tokens"] == 7
        assert completed["usage"]["output_tokens"] == 2
        assert completed["usage"]["total_tokens"] == 9

        part_done = next(e for e in events if e["type"] == "response.content_part.done")
        assert part_done["part"]["text"] == ""
        item_done = next(e for e in events if e["type"] == "response.output_item.done")
        assert item_done["item"]["status"] == "completed"

    @pytest.mark.asyncio
    async def test_empty_text_emits_lifecycle_without_deltas(self):
        emulator = ResponsesStreamEmulator("m", "", pacing_delay=0)
        events, _ = decode_events(await collect_frames(emulator))

        assert [e["type"] for e in events] == [
            t for t in STREAM_EVENT_ORDER if t != EVENT_OUTPUT_TEXT_DELTA
        ]
        assert events[-1]["response"]["usage"]["output_tokens"] == 0

    @pytest.mark.asyncio
    async def test_output_tokens_fall_back_to_slice_count(self):
        emulator = ResponsesStreamEmulator("m", "abcdefghi", slice_width=4, pacing_delay=0)
        events, _ = decode_events(await collect_frames(emulator))
        usage = events[-1]["response"]["usage"]
        assert usage["input_tokens"] == 0
        assert usage["output_tokens"] == 3
        assert usage["total_tokens"] == 3

    @pytest.mark.asyncio
    async def test_shell_echoes_request(self):
        emulator = ResponsesStreamEmulator(
            "m", "x", request={"temperature": 0.5, "instructions": "Be brief."}, pacing_delay=0
        )
        events, _ = decode_events(await collect_frames(emulator))
        for event in (events[0], events[-1]):
            assert event["response"]["temperature"] == 0.5
            assert event["response"]["instructions"] == "Be brief."

    @pytest.mark.asyncio
    async def test_disconnect_before_first_delta_pause(self):
        checker = DisconnectAfter(0)
        emulator = ResponsesStreamEmulator(
            "m", "hello world", pacing_delay=0, disconnect_checker=checker
        )
        events, _ = decode_events(await collect_frames(emulator))

        assert emulator.state is StreamState.ABORTED
        assert [e["type"] for e in events] == list(STREAM_EVENT_ORDER[:4])
        assert checker.calls == 1

    @pytest.mark.asyncio
    async def test_channel_checked_before_every_pause(self):
        checker = DisconnectAfter(100)
        emulator = ResponsesStreamEmulator(
            "m", "hello world", pacing_delay=0, disconnect_checker=checker
        )
        await collect_frames(emulator)

        assert emulator.state is StreamState.DONE
        assert checker.calls == 3
