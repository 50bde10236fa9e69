"""
Shared pytest fixtures for the event dispatch test suite.

Provides reusable fixtures for creating AnalyticsEvent test objects.
"""

import logging

import pytest

from event_dispatch.destination.bulker import BulkerDestinationConfig, FunctionContext
from event_dispatch.monitoring.logging import ROOT_LOGGER_NAME
from event_dispatch.schemas.event import AnalyticsEvent


@pytest.fixture
def create_event():
    """
    Return a function that creates AnalyticsEvent objects with sensible defaults.

    All defaults can be overridden via keyword arguments (wire names).

    Example:
        event = create_event("identify", userId="u1", traits={"name": "Ann"})
    """

    def _create_event(event_type: str | None = "track", **kwargs) -> AnalyticsEvent:
        payload = {
            "messageId": "msg-1",
            "timestamp": "2024-06-15T20:00:00.000Z",
        }
        if event_type is not None:
            payload["type"] = event_type
        payload.update(kwargs)
        return AnalyticsEvent.from_payload(payload)

    return _create_event


@pytest.fixture
def web_context():
    """Return a browser-like event context."""
    return {
        "ip": "192.168.1.77",
        "userAgent": "Mozilla/5.0",
        "locale": "en-US",
        "page": {
            "url": "https://shop.example.com/checkout?step=2",
            "title": "Checkout",
            "referrer": "https://www.google.com/",
            "encoding": "UTF-8",
            "screenResolution": "1920x1080",
            "timezoneOffset": -120,
        },
        "campaign": {"name": "spring", "source": "newsletter"},
        "screen": {"innerWidth": 1280, "innerHeight": 720},
        "traits": {"email": "ann@example.com", "groupId": "g-ctx"},
    }


@pytest.fixture
def track_event(create_event, web_context):
    """Return a named track event with properties."""
    return create_event(
        "track",
        event="Signed Up",
        userId="u1",
        anonymousId="anon-1",
        writeKey="wk-123",
        context=web_context,
        properties={"plan": "Pro", "trialDays": 14},
    )


@pytest.fixture
def identify_event(create_event):
    """Return the canonical identify event."""
    return create_event(
        "identify",
        userId="u1",
        traits={"name": "Ann", "groupId": "g1"},
    )


@pytest.fixture
def function_context():
    """Return invocation ids for metrics metadata."""
    return FunctionContext(
        workspace_id="ws1",
        source_id="src1",
        destination_id="dst1",
        connection_id="conn1",
    )


@pytest.fixture
def destination_config():
    """Return a Bulker destination config using the multi-table layout."""
    return BulkerDestinationConfig(
        bulker_endpoint="http://bulker.test",
        destination_id="dst1",
        auth_token="secret-token",
        data_layout="segment",
    )


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handler/propagation changes made by setup_logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
