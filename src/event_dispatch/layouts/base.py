"""
Base Data Layout.

Abstract base class defining the interface for all data layouts.
Implements the Strategy pattern: each layout reshapes one analytics event into
one or more table records.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from event_dispatch.schemas.event import AnalyticsEvent


class DataLayout(str, Enum):
    """Available data layouts."""

    SEGMENT = "segment"
    SEGMENT_SINGLE_TABLE = "segment-single-table"
    JITSU_LEGACY = "jitsu-legacy"
    PASSTHROUGH = "passthrough"


DEFAULT_DATA_LAYOUT = DataLayout.SEGMENT_SINGLE_TABLE


@dataclass(frozen=True)
class MappedEvent:
    """
    One record destined for one table.
    """

    record: dict[str, Any]
    table: str

    def __post_init__(self):
        if not isinstance(self.table, str) or not self.table:
            raise ValueError(f"Table name must be a non-empty string, got {self.table!r}")


class DataLayoutStrategy(ABC):
    """
    Abstract base for data layouts.

    Subclasses must implement:
        - layout(): Map an event to one record or an ordered list of records
    """

    kind: DataLayout

    @abstractmethod
    def layout(self, event: AnalyticsEvent) -> MappedEvent | list[MappedEvent]:
        """
        Lay out a single event.

        Args:
            event: Parsed analytics event (never mutated)

        Returns:
            A MappedEvent, or an ordered list of them for fan-out layouts
        """
        pass

    def map_event(self, event: AnalyticsEvent) -> list[MappedEvent]:
        """Lay out ``event`` and always return a list of MappedEvent."""
        result = self.layout(event)
        if isinstance(result, MappedEvent):
            return [result]
        return list(result)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r})"
