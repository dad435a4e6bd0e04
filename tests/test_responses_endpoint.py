"""Simulation tests for POST /v1/responses."""

from __future__ import annotations

import pytest

from workers_gateway.core.models import LLAMA_70B, LLAMA_8B
from workers_gateway.testing import (
    assert_error_envelope,
    assert_responses_api_valid,
    assert_responses_sse_valid,
)
from workers_gateway.types.responses import EVENT_RESPONSE_COMPLETED, STREAM_EVENT_ORDER


@pytest.mark.asyncio
async def test_responses_nonstream(stub_harness) -> None:
    backend, harness = stub_harness
    backend.enqueue_text("Hello, I'm an assistant!", prompt_tokens=4, completion_tokens=6)

    async with harness.make_async_client() as client:
        response = await client.post(
            "/v1/responses",
            json={"model": "gpt-4o-mini", "input": "Hello"},
        )

    assert response.status_code == 200
    payload = response.json()
    assert_responses_api_valid(payload)
    assert payload["status"] == "completed"
    assert payload["model"] == "gpt-4o-mini"
    assert payload["output_text"] == "Hello, I'm an assistant!"
    assert payload["output"][0]["content"][0]["text"] == "Hello, I'm an assistant!"
    assert payload["usage"] == {"input_tokens": 4, "output_tokens": 6, "total_tokens": 10}

    assert backend.calls == [(LLAMA_8B, {"prompt": "[User]\nHello"})]


@pytest.mark.asyncio
async def test_responses_compiles_items_and_instructions(stub_harness) -> None:
    backend, harness = stub_harness
    backend.enqueue_text("ok")

    async with harness.make_async_client() as client:
        response = await client.post(
            "/v1/responses",
            json={
                "model": "gpt-4",
                "instructions": "Be brief.",
                "input": [
                    {"role": "user", "content": [
                        {"type": "input_text", "text": "foo"},
                        {"type": "input_image", "image_url": "http://example.com/a.png"},
                        {"type": "input_text", "text": "bar"},
                    ]},
                ],
                "temperature": 0.4,
                "max_output_tokens": 100,
            },
        )

    assert response.status_code == 200
    model, options = backend.calls[0]
    assert model == LLAMA_70B
    assert options == {
        "prompt": "[System]\nBe brief.\n\n[User]\nfoobar",
        "temperature": 0.4,
        "max_tokens": 100,
    }


@pytest.mark.asyncio
async def test_responses_stream(stub_harness) -> None:
    backend, harness = stub_harness
    backend.enqueue_text("hello world", prompt_tokens=1, completion_tokens=1)

    response, events, saw_done = await harness.collect_sse_events(
        "/v1/responses",
        {"model": "gpt-4o", "input": "hi", "stream": True, "temperature": 0.7},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert not saw_done
    assert assert_responses_sse_valid(events) == "hello world"
    assert events[0]["type"] == STREAM_EVENT_ORDER[0]
    assert events[-1]["type"] == EVENT_RESPONSE_COMPLETED

    completed = events[-1]["response"]
    assert completed["model"] == "gpt-4o"
    assert completed["temperature"] == 0.7
    assert completed["usage"]["total_tokens"] == 2
    assert completed["output"][0]["content"][0]["text"] == "hello world"
    assert backend.calls[0][0] == LLAMA_70B


@pytest.mark.asyncio
async def test_responses_stream_empty_text(stub_harness) -> None:
    backend, harness = stub_harness
    backend.enqueue({"response": ""})

    _, events, _ = await harness.collect_sse_events(
        "/v1/responses", {"model": "gpt-4o", "input": "hi", "stream": True}
    )

    assert len(events) == 7
    assert all(event["type"] != "response.output_text.delta" for event in events)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, message",
    [
        ({"model": "gpt-4o"}, "Input is required"),
        ({"model": "gpt-4o", "input": ""}, "Input is required"),
        ({"model": "gpt-4o", "input": []}, "Input is required"),
        ({"model": "gpt-4o", "input": 42}, "Input must be a string or an array of input items"),
    ],
)
async def test_responses_requires_input(stub_harness, body, message) -> None:
    backend, harness = stub_harness

    async with harness.make_async_client() as client:
        response = await client.post("/v1/responses", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert_error_envelope(payload, "invalid_request_error")
    assert payload["error"]["message"] == message
    assert backend.calls == []


@pytest.mark.asyncio
async def test_responses_backend_failure(stub_harness) -> None:
    backend, harness = stub_harness
    backend.enqueue(RuntimeError("backend exploded"))

    async with harness.make_async_client() as client:
        response = await client.post("/v1/responses", json={"input": "hi"})

    assert response.status_code == 500
    payload = response.json()
    assert_error_envelope(payload, "internal_error")
    assert payload["error"]["message"] == "backend exploded"
