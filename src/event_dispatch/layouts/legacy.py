"""
Legacy flat data layout.

Produces one flat record per event with a fixed, explicit set of columns
(anonymized IP, API key, parsed page URL, page and screen metadata, user
object, ...). Track properties are merged in at the top level.
"""

from typing import Any

from event_dispatch.normalization.keys import (
    ABSENT,
    as_mapping,
    get_value,
    merge,
    normalize_keys,
    omit,
    strip_absent,
)
from event_dispatch.normalization.privacy import anonymize_ip
from event_dispatch.normalization.urls import parse_page_url
from event_dispatch.schemas.event import AnalyticsEvent, EventType

from .base import DataLayout, DataLayoutStrategy, MappedEvent
from .tables import DEFAULT_TABLE, resolve_table_name

SOURCE_MARKER = "jitsu"


class LegacyLayout(DataLayoutStrategy):
    """
    Flat single-table layout with legacy column names.
    """

    kind = DataLayout.JITSU_LEGACY

    def layout(self, event: AnalyticsEvent) -> MappedEvent:
        """
        Build the flat legacy record.

        Named columns that carry a value take precedence over same-named
        track properties; a column without a value leaves the property alone.

        Returns:
            MappedEvent targeting the override table or ``events``
        """
        payload = event.to_dict()
        context = event.context_dict
        page = as_mapping(context.get("page"))
        properties = event.properties_dict

        url = page.get("url") or properties.get("url")
        url_parts = parse_page_url(url)

        columns = {
            "anon_ip": anonymize_ip(context.get("ip")),
            "api_key": event.write_key or "",
            "click_id": {},
            "doc_encoding": page.get("encoding") or properties.get("encoding") or ABSENT,
            "doc_host": url_parts.host if url_parts else ABSENT,
            "doc_path": url_parts.path if url_parts else ABSENT,
            "doc_search": url_parts.search if url_parts else ABSENT,
            "eventn_ctx_event_id": get_value(payload, "messageId"),
            "event_type": event.event or event.type or ABSENT,
            "local_tz_offset": (
                page.get("timezoneOffset") or properties.get("timezoneOffset") or ABSENT
            ),
            "page_title": get_value(page, "title"),
            "referer": get_value(page, "referrer"),
            "screen_resolution": get_value(page, "screenResolution"),
            "source_ip": get_value(context, "ip"),
            "src": SOURCE_MARKER,
            "url": url if isinstance(url, str) else "",
            "user": _user(event, payload),
            "user_agent": get_value(context, "userAgent"),
            "user_language": get_value(context, "locale"),
            "utc_time": get_value(payload, "timestamp"),
            "_timestamp": get_value(payload, "timestamp"),
            "utm": get_value(context, "campaign"),
            "vp_size": _viewport_size(context.get("screen")),
        }

        if event.type == EventType.TRACK:
            record = merge(properties, columns)
        else:
            record = columns

        return MappedEvent(
            record=strip_absent(normalize_keys(record)),
            table=resolve_table_name(event, DEFAULT_TABLE),
        )


def _user(event: AnalyticsEvent, payload: dict[str, Any]) -> dict[str, Any]:
    """User object: id, email and name, plus every other trait."""
    traits = as_mapping(payload.get("traits"))
    context_traits = event.context_traits
    return merge(
        {
            "id": get_value(payload, "userId"),
            "email": traits.get("email") or context_traits.get("email") or ABSENT,
            "name": traits.get("name") or context_traits.get("name") or ABSENT,
        },
        omit(merge(context_traits, traits), "email", "name"),
    )


def _viewport_size(screen: Any) -> str:
    """Format the viewport as ``<width>x<height>``; missing sides are 0."""
    screen = as_mapping(screen)
    return f"{_dimension(screen.get('innerWidth'))}x{_dimension(screen.get('innerHeight'))}"


def _dimension(value: Any) -> Any:
    if not value:
        return 0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
