"""Table name resolution for laid-out records."""

from typing import Any

from event_dispatch.schemas.event import AnalyticsEvent

DEFAULT_TABLE = "events"

_PLURALS = {
    "identify": "identifies",
    "page": "pages",
    "track": "tracks",
    "group": "groups",
}


def pluralize(event_type: Any) -> str:
    """
    Map an event type to its default table name.

    Only the well-known analytics call types are pluralized; any other tag is
    used as-is (as text). A missing type falls back to the generic events
    table.

    Example:
        >>> pluralize("identify")
        'identifies'
        >>> pluralize("custom_thing")
        'custom_thing'
    """
    if not event_type:
        return DEFAULT_TABLE
    name = str(event_type)
    return _PLURALS.get(name, name)


def resolve_table_name(event: AnalyticsEvent, default: str) -> str:
    """Return the event's explicit table override, or ``default``."""
    if event.table_name:
        return str(event.table_name)
    return default
