"""
Segment-compatible data layouts.

Two flavours share one implementation:
- single-table: every event lands in the generic ``events`` table, with the
  original context nested under ``context``
- multi-table: every event type (and every named track event) gets its own
  table, with context fields flattened into the record

Each branch assembles its record from an explicit, ordered list of sources.
Later sources win on key collision.
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
from event_dispatch.schemas.event import TABLE_NAME_PARAMETER, AnalyticsEvent, EventType

from .base import DataLayout, DataLayoutStrategy, MappedEvent
from .tables import DEFAULT_TABLE, pluralize, resolve_table_name


GROUP_ID = "groupId"

# Top-level keys that never reach the record verbatim, per branch.
_IDENTIFY_EXCLUDED = ("context", "properties", "traits", "type", TABLE_NAME_PARAMETER)
_TRACK_EXCLUDED = ("context", "properties", "type", TABLE_NAME_PARAMETER)
_TRACK_FLAT_EXCLUDED = ("properties", "type", TABLE_NAME_PARAMETER)
_DEFAULT_EXCLUDED = ("context", "properties", TABLE_NAME_PARAMETER)

Source = dict[str, Any] | None


class SegmentLayout(DataLayoutStrategy):
    """
    Segment-style layout in single-table or multi-table mode.
    """

    def __init__(self, single_table: bool = True):
        """
        Initialize the layout.

        Args:
            single_table: True for ``segment-single-table``, False for the
                multi-table ``segment`` layout
        """
        self.single_table = single_table
        self.kind = DataLayout.SEGMENT_SINGLE_TABLE if single_table else DataLayout.SEGMENT

    def layout(self, event: AnalyticsEvent) -> MappedEvent | list[MappedEvent]:
        """
        Lay out an event according to its type.

        Returns:
            One MappedEvent, or two for a named track event in multi-table mode
        """
        payload = event.to_dict()

        if event.type == EventType.IDENTIFY:
            sources = self._identify_sources(event, payload)
        elif event.type == EventType.GROUP:
            sources = self._group_sources(event, payload)
        elif event.type == EventType.TRACK:
            sources = self._track_sources(event, payload)
        else:
            sources = self._default_sources(event, payload)

        record = _finalize(merge(*sources))

        if event.table_name:
            if event.type is not None:
                record["type"] = event.type
            return MappedEvent(record=record, table=resolve_table_name(event, DEFAULT_TABLE))

        if self.single_table:
            if event.type is not None:
                record["type"] = event.type
            return MappedEvent(record=record, table=DEFAULT_TABLE)

        if event.type == EventType.TRACK and event.event:
            # The generic tracks table gets the event without its properties;
            # the full event goes to the table named after the event.
            base_track = _finalize(omit(payload, *_TRACK_FLAT_EXCLUDED))
            return [
                MappedEvent(record=base_track, table=pluralize(EventType.TRACK.value)),
                MappedEvent(record=record, table=str(event.event)),
            ]

        return MappedEvent(record=record, table=pluralize(event.type))

    # -------------------------------------------------------------------------
    # Sources per event type
    # -------------------------------------------------------------------------

    def _identify_sources(self, event: AnalyticsEvent, payload: dict[str, Any]) -> list[Source]:
        context = payload.get("context")
        traits = as_mapping(payload.get("traits"))
        context_traits = event.context_traits
        rest = omit(payload, *_IDENTIFY_EXCLUDED)

        if not self.single_table:
            return [
                omit(context, "traits"),
                event.properties,
                omit(context_traits, GROUP_ID),
                omit(traits, GROUP_ID),
                rest,
            ]

        group_id = traits.get(GROUP_ID) or context_traits.get(GROUP_ID) or ABSENT
        context_block = None
        if event.context is not None or event.traits is not None:
            context_block = {
                "context": merge(
                    context,
                    {
                        "traits": omit(merge(context_traits, traits), GROUP_ID),
                        GROUP_ID: group_id,
                    },
                )
            }
        return [context_block, event.properties, {GROUP_ID: group_id}, rest]

    def _group_sources(self, event: AnalyticsEvent, payload: dict[str, Any]) -> list[Source]:
        context = payload.get("context")
        rest = omit(payload, *_IDENTIFY_EXCLUDED)

        if not self.single_table:
            return [
                omit(context, "traits"),
                event.properties,
                omit(event.traits, GROUP_ID),
                rest,
            ]

        context_block = None
        if event.context is not None or event.traits is not None:
            context_block = {
                "context": merge(
                    context,
                    {
                        "group": payload.get("traits", ABSENT),
                        GROUP_ID: get_value(payload, GROUP_ID),
                    },
                )
            }
        return [context_block, event.properties, rest]

    def _track_sources(self, event: AnalyticsEvent, payload: dict[str, Any]) -> list[Source]:
        properties = event.properties_dict

        if not self.single_table:
            return [properties, omit(payload, *_TRACK_FLAT_EXCLUDED)]

        context_traits = event.context_traits
        property_traits = properties.get("traits")
        if not isinstance(property_traits, dict):
            property_traits = None

        context_block = None
        if event.context is not None or property_traits is not None:
            context_block = {
                "context": merge(
                    payload.get("context"),
                    {
                        "traits": omit(merge(context_traits, property_traits), GROUP_ID),
                        GROUP_ID: get_value(context_traits, GROUP_ID),
                    },
                )
            }
        return [context_block, omit(properties, "traits"), omit(payload, *_TRACK_EXCLUDED)]

    def _default_sources(self, event: AnalyticsEvent, payload: dict[str, Any]) -> list[Source]:
        context = payload.get("context")
        rest = omit(payload, *_DEFAULT_EXCLUDED)

        if not self.single_table:
            return [context, event.properties, rest]

        context_block = None
        if event.context is not None:
            context_traits = event.context_traits
            context_block = {
                "context": merge(
                    context,
                    {
                        "traits": omit(context_traits, GROUP_ID),
                        GROUP_ID: get_value(context_traits, GROUP_ID),
                    },
                )
            }
        return [context_block, event.properties, rest]


def _finalize(record: dict[str, Any]) -> dict[str, Any]:
    """Normalize keys and drop absent values."""
    return strip_absent(normalize_keys(record))
