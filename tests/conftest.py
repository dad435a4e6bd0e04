"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import copy
from typing import Any, Generator

import httpx
import pytest

from workers_gateway.core.upstream_transport import (
    clear_upstream_transports,
    register_upstream_transport,
)
from workers_gateway.testing import (
    DEFAULT_TEST_CONFIG,
    FAKE_HOST,
    FakeWorkersAI,
    GatewayHarness,
    StubBackend,
)


@pytest.fixture(autouse=True)
def isolate_gateway_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell from changing auth or bind settings in tests."""
    for name in (
        "OPENAI_API_KEY",
        "WORKERS_GATEWAY_CONFIG",
        "WORKERS_GATEWAY_HOST",
        "WORKERS_GATEWAY_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Transport Registry Fixtures
# =============================================================================


@pytest.fixture
def clear_transport_registry() -> Generator[None, None, None]:
    """Clear upstream transport registry after test.

    Use this fixture in tests that register fake transports.
    """
    yield
    clear_upstream_transports()


# =============================================================================
# Harness Configuration Builders
# =============================================================================


def build_gateway_config(
    *,
    api_key: str | None = None,
    slice_width: int = 4,
    pacing_delay_s: float = 0,
    base_url: str | None = None,
) -> dict[str, Any]:
    """Build a gateway config for harness tests.

    Args:
        api_key: Static bearer secret (None disables auth)
        slice_width: Characters per emulated delta
        pacing_delay_s: Seconds between emulated deltas
        base_url: Workers AI base URL override

    Returns:
        Config dict for GatewayHarness
    """
    config = copy.deepcopy(DEFAULT_TEST_CONFIG)
    config["auth"]["api_key"] = api_key
    config["streaming"] = {"slice_width": slice_width, "pacing_delay_s": pacing_delay_s}
    if base_url is not None:
        config["backend"]["base_url"] = base_url
    return config


# =============================================================================
# Harness Fixtures
# =============================================================================


@pytest.fixture
def stub_harness() -> Generator[tuple[StubBackend, GatewayHarness], None, None]:
    """Create a harness whose backend is an in-process stub.

    Returns:
        Tuple of (StubBackend, GatewayHarness)

    Usage:
        async def test_chat(stub_harness):
            backend, harness = stub_harness
            backend.enqueue_text("Hello")
            # ... test code ...
    """
    backend = StubBackend()
    harness = GatewayHarness(build_gateway_config(), backend=backend)
    try:
        yield backend, harness
    finally:
        harness.close()


@pytest.fixture
def workers_ai_harness(
    clear_transport_registry: None,
) -> Generator[tuple[FakeWorkersAI, GatewayHarness], None, None]:
    """Create a harness that talks HTTP to a fake Workers AI API.

    Returns:
        Tuple of (FakeWorkersAI, GatewayHarness)
    """
    fake = FakeWorkersAI()
    register_fake_workers_ai(fake)
    harness = GatewayHarness(build_gateway_config())
    try:
        yield fake, harness
    finally:
        harness.close()


# =============================================================================
# Helper Functions for Tests
# =============================================================================


def register_fake_workers_ai(fake: FakeWorkersAI, host: str = FAKE_HOST) -> None:
    """Route requests for ``host`` to the given FakeWorkersAI app."""
    register_upstream_transport(host, httpx.ASGITransport(app=fake.app))
