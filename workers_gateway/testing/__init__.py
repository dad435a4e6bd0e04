"""Testing utilities for in-process gateway simulations."""

from .assertions import (
    assert_chat_chunks_valid,
    assert_error_envelope,
    assert_openai_chat_valid,
    assert_responses_api_valid,
    assert_responses_sse_valid,
    assert_usage_consistent,
)
from .fake_workers_ai import FAKE_BASE_URL, FAKE_HOST, FakeWorkersAI, WorkersAIResponse
from .gateway_harness import DEFAULT_TEST_CONFIG, GatewayHarness
from .stub_backend import StubBackend

__all__ = [
    # Core simulation classes
    "FakeWorkersAI",
    "WorkersAIResponse",
    "GatewayHarness",
    "StubBackend",
    "DEFAULT_TEST_CONFIG",
    "FAKE_BASE_URL",
    "FAKE_HOST",
    # Assertions
    "assert_chat_chunks_valid",
    "assert_error_envelope",
    "assert_openai_chat_valid",
    "assert_responses_api_valid",
    "assert_responses_sse_valid",
    "assert_usage_consistent",
]
