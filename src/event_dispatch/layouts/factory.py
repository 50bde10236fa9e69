"""
Data layout selection.

Parses a configured layout kind into one of the closed set of DataLayout
values and returns the matching strategy instance.

Usage:
    from event_dispatch.layouts.factory import get_layout

    layout = get_layout("segment")
    for mapped in layout.map_event(event):
        ...
"""

import logging

from event_dispatch.errors import UnknownLayoutError

from .base import DEFAULT_DATA_LAYOUT, DataLayout, DataLayoutStrategy
from .legacy import LegacyLayout
from .passthrough import PassthroughLayout
from .segment import SegmentLayout

logger = logging.getLogger(__name__)

# Descriptive names accepted in configuration next to the canonical values.
LAYOUT_ALIASES = {
    "segment-multi-table": DataLayout.SEGMENT,
    "legacy-flat": DataLayout.JITSU_LEGACY,
}


def parse_layout_kind(kind: DataLayout | str | None) -> DataLayout:
    """
    Parse a configuration value into a DataLayout.

    Args:
        kind: Layout name (e.g. "segment-single-table"), DataLayout, or None
            for the default layout

    Returns:
        DataLayout enum member

    Raises:
        UnknownLayoutError: If the value names no known layout
    """
    if kind is None or kind == "":
        return DEFAULT_DATA_LAYOUT
    if isinstance(kind, DataLayout):
        return kind
    if isinstance(kind, str):
        value = kind.strip().lower()
        if value in LAYOUT_ALIASES:
            return LAYOUT_ALIASES[value]
        try:
            return DataLayout(value)
        except ValueError:
            pass
    raise UnknownLayoutError(kind, available_layouts())


def available_layouts() -> list[str]:
    """List canonical layout names."""
    return [layout.value for layout in DataLayout]


def get_layout(kind: DataLayout | str | None = DEFAULT_DATA_LAYOUT) -> DataLayoutStrategy:
    """
    Create the layout strategy for the given kind.

    Args:
        kind: Layout name or DataLayout enum value

    Returns:
        Configured DataLayoutStrategy instance

    Raises:
        UnknownLayoutError: If the kind is not a known layout
    """
    layout = parse_layout_kind(kind)
    logger.debug(f"Using data layout '{layout.value}'")

    if layout == DataLayout.SEGMENT:
        return SegmentLayout(single_table=False)
    elif layout == DataLayout.SEGMENT_SINGLE_TABLE:
        return SegmentLayout(single_table=True)
    elif layout == DataLayout.JITSU_LEGACY:
        return LegacyLayout()
    else:
        return PassthroughLayout()
