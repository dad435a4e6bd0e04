#!/usr/bin/env python3
"""Replay a canned Workers AI answer through an in-process gateway.

Handy for eyeballing the emulated streams without Cloudflare credentials.

Usage:
    uv run python scripts/simulate_gateway.py --text "Hello there" --endpoint responses --stream
"""

from __future__ import annotations

import argparse
import asyncio
import copy
import json
from typing import Any

import httpx

from workers_gateway.core.sse import DONE_SENTINEL
from workers_gateway.core.upstream_transport import (
    clear_upstream_transports,
    register_upstream_transport,
)
from workers_gateway.testing import (
    DEFAULT_TEST_CONFIG,
    FAKE_HOST,
    FakeWorkersAI,
    GatewayHarness,
)

ENDPOINTS = {
    "chat": "/v1/chat/completions",
    "responses": "/v1/responses",
}


def _build_body(endpoint: str, model: str, prompt: str, stream: bool) -> dict[str, Any]:
    if endpoint == "chat":
        return {"model": model, "messages": [{"role": "user", "content": prompt}], "stream": stream}
    return {"model": model, "input": prompt, "stream": stream}


async def _run(args: argparse.Namespace) -> int:
    fake = FakeWorkersAI()
    fake.enqueue_text(args.text, prompt_tokens=args.prompt_tokens, completion_tokens=args.completion_tokens)
    register_upstream_transport(FAKE_HOST, httpx.ASGITransport(app=fake.app))

    config = copy.deepcopy(DEFAULT_TEST_CONFIG)
    config["streaming"] = {"slice_width": args.slice_width, "pacing_delay_s": args.pacing_delay}

    path = ENDPOINTS[args.endpoint]
    body = _build_body(args.endpoint, args.model, args.prompt, args.stream)

    try:
        with GatewayHarness(config) as harness:
            if args.stream:
                response, events = await harness.collect_sse(path, body)
                print(f"HTTP {response.status_code}")
                for event in events:
                    if event.data == DONE_SENTINEL:
                        print(event.data)
                    else:
                        print(json.dumps(event.json(), ensure_ascii=False))
            else:
                async with harness.make_async_client() as client:
                    response = await client.post(path, json=body)
                print(f"HTTP {response.status_code}")
                print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    finally:
        clear_upstream_transports()

    print("Backend received:", json.dumps(fake.received[0]["json"], ensure_ascii=False))
    return 0 if response.status_code == 200 else 1


async def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate a gateway request against a fake Workers AI")
    parser.add_argument("--text", required=True, help="Text the fake backend answers with")
    parser.add_argument("--endpoint", choices=sorted(ENDPOINTS), default="chat")
    parser.add_argument("--model", default="gpt-4o")
    parser.add_argument("--prompt", default="Hello")
    parser.add_argument("--stream", action="store_true", help="Request an emulated stream")
    parser.add_argument("--slice-width", type=int, default=4)
    parser.add_argument("--pacing-delay", type=float, default=0.0)
    parser.add_argument("--prompt-tokens", type=int, default=None)
    parser.add_argument("--completion-tokens", type=int, default=None)
    return await _run(parser.parse_args())


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
