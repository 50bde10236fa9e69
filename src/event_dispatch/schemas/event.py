# src/event_dispatch/schemas/event.py
"""
Analytics Event Envelope.

Typed view over the analytics events (track, identify, group, page, ...) that
arrive at a destination. Well-known slots are exposed as named optional
fields, while any unknown key is kept as an extra field so that nothing is
lost when the event is laid out into table records.

Events are free-form JSON, so the named slots accept any value and never
coerce it. The payload as received is kept alongside the typed view:
``to_dict()`` returns exactly the keys and values that were sent.
"""

import copy
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from event_dispatch.errors import InvalidEventError

# Reserved top-level key that lets producers force the destination table.
TABLE_NAME_PARAMETER = "JITSU_TABLE_NAME"


class EventType(str, Enum):
    """Analytics call types with dedicated layout handling."""

    TRACK = "track"
    IDENTIFY = "identify"
    GROUP = "group"
    PAGE = "page"
    ALIAS = "alias"


# ============================================================================
# CONTEXT
# ============================================================================


class EventContext(BaseModel):
    """
    Event context: where and by whom the event was produced.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    ip: Any = None
    user_agent: Any = Field(default=None, alias="userAgent")
    locale: Any = None
    page: Any = None
    traits: Any = None
    campaign: Any = None
    screen: Any = None
    client_ids: Any = Field(default=None, alias="clientIds")


# ============================================================================
# EVENT
# ============================================================================


class AnalyticsEvent(BaseModel):
    """
    A single incoming analytics event.

    Example:
        >>> event = AnalyticsEvent.from_payload(
        ...     {"type": "track", "event": "Signed Up", "userId": "u1"}
        ... )
        >>> event.user_id
        'u1'
        >>> event.to_dict()
        {'type': 'track', 'event': 'Signed Up', 'userId': 'u1'}
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: Any = None
    event: Any = None
    context: EventContext | None = None
    properties: Any = None
    traits: Any = None

    user_id: Any = Field(default=None, alias="userId")
    anonymous_id: Any = Field(default=None, alias="anonymousId")
    group_id: Any = Field(default=None, alias="groupId")
    message_id: Any = Field(default=None, alias="messageId")
    write_key: Any = Field(default=None, alias="writeKey")
    timestamp: Any = None

    table_name: Any = Field(default=None, alias=TABLE_NAME_PARAMETER)

    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("context", mode="before")
    @classmethod
    def _context_mapping_only(cls, value: Any) -> Any:
        # A non-object context is kept in the payload but has no typed view.
        return value if isinstance(value, Mapping) else None

    @model_validator(mode="wrap")
    @classmethod
    def _keep_payload(cls, data: Any, handler) -> "AnalyticsEvent":
        event = handler(data)
        if isinstance(data, Mapping):
            event._payload = copy.deepcopy(dict(data))
        return event

    @classmethod
    def from_payload(cls, payload: "AnalyticsEvent | Mapping[str, Any]") -> "AnalyticsEvent":
        """
        Build an event from a decoded JSON payload.

        Args:
            payload: Wire-format mapping, or an already parsed event

        Returns:
            AnalyticsEvent instance

        Raises:
            InvalidEventError: If the payload is not a JSON object
        """
        if isinstance(payload, AnalyticsEvent):
            return payload
        if not isinstance(payload, Mapping):
            raise InvalidEventError(
                f"Event must be a JSON object, got {type(payload).__name__}"
            )
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            raise InvalidEventError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        """Return the wire-format payload (original keys and values, deep copy)."""
        return copy.deepcopy(self._payload)

    @property
    def context_dict(self) -> dict[str, Any]:
        """Wire-format context, or an empty dict when the event has none."""
        context = self._payload.get("context")
        return dict(context) if isinstance(context, Mapping) else {}

    @property
    def context_traits(self) -> dict[str, Any]:
        """``context.traits`` or an empty dict."""
        traits = self.context_dict.get("traits")
        return dict(traits) if isinstance(traits, Mapping) else {}

    @property
    def properties_dict(self) -> dict[str, Any]:
        """``properties`` when it is an object, else an empty dict."""
        return dict(self.properties) if isinstance(self.properties, Mapping) else {}
