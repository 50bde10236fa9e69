"""
Data layouts: reshape one analytics event into table records.
"""

from .base import DEFAULT_DATA_LAYOUT, DataLayout, DataLayoutStrategy, MappedEvent
from .factory import available_layouts, get_layout, parse_layout_kind
from .legacy import LegacyLayout
from .passthrough import PassthroughLayout
from .segment import SegmentLayout
from .tables import DEFAULT_TABLE, pluralize, resolve_table_name

__all__ = [
    "DEFAULT_DATA_LAYOUT",
    "DEFAULT_TABLE",
    "DataLayout",
    "DataLayoutStrategy",
    "LegacyLayout",
    "MappedEvent",
    "PassthroughLayout",
    "SegmentLayout",
    "available_layouts",
    "get_layout",
    "parse_layout_kind",
    "pluralize",
    "resolve_table_name",
]
