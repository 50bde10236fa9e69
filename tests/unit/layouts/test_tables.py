"""
Unit tests for table name resolution.
"""

import pytest

from event_dispatch.layouts.base import MappedEvent
from event_dispatch.layouts.tables import DEFAULT_TABLE, pluralize, resolve_table_name
from event_dispatch.schemas.event import TABLE_NAME_PARAMETER


class TestPluralize:
    """Tests for pluralize."""

    @pytest.mark.parametrize(
        "event_type,expected",
        [
            ("identify", "identifies"),
            ("page", "pages"),
            ("track", "tracks"),
            ("group", "groups"),
            ("alias", "alias"),
            ("screen", "screen"),
            ("custom_thing", "custom_thing"),
        ],
    )
    def test_known_and_unknown(self, event_type, expected):
        assert pluralize(event_type) == expected

    def test_missing_type(self):
        """No type falls back to the generic table."""
        assert pluralize(None) == DEFAULT_TABLE
        assert pluralize("") == "events"


class TestResolveTableName:
    """Tests for resolve_table_name."""

    def test_override(self, create_event):
        event = create_event(**{TABLE_NAME_PARAMETER: "custom_table"})
        assert resolve_table_name(event, "events") == "custom_table"

    def test_default(self, create_event):
        assert resolve_table_name(create_event(), "fallback") == "fallback"


class TestMappedEvent:
    """Tests for the MappedEvent value type."""

    def test_valid(self):
        mapped = MappedEvent(record={"a": 1}, table="events")
        assert mapped.table == "events"

    @pytest.mark.parametrize("table", ["", None, 3])
    def test_table_required(self, table):
        """Table names must be non-empty strings."""
        with pytest.raises(ValueError):
            MappedEvent(record={}, table=table)


class TestFreeFormTableNames:
    """Table names are always text, whatever JSON type the event carries."""

    def test_pluralize_non_string_type(self):
        assert pluralize(5) == "5"

    def test_non_string_override(self, create_event):
        event = create_event(**{TABLE_NAME_PARAMETER: 7})
        assert resolve_table_name(event, "events") == "7"
