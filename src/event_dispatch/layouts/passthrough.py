"""Passthrough data layout: the event is stored as-is."""

from event_dispatch.normalization.keys import omit
from event_dispatch.schemas.event import TABLE_NAME_PARAMETER, AnalyticsEvent

from .base import DataLayout, DataLayoutStrategy, MappedEvent
from .tables import DEFAULT_TABLE, resolve_table_name


class PassthroughLayout(DataLayoutStrategy):
    """Store the event untouched, minus the table override key."""

    kind = DataLayout.PASSTHROUGH

    def layout(self, event: AnalyticsEvent) -> MappedEvent:
        return MappedEvent(
            record=omit(event.to_dict(), TABLE_NAME_PARAMETER),
            table=resolve_table_name(event, DEFAULT_TABLE),
        )
