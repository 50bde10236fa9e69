"""
Unit tests for the keys module.

Tests key normalization, absent-value stripping and record assembly helpers.
"""

import copy

import pytest

from event_dispatch.normalization.keys import (
    ABSENT,
    get_value,
    merge,
    normalize_keys,
    omit,
    strip_absent,
    to_snake_case,
)

# =============================================================================
# TEST DATA
# =============================================================================


NESTED_PAYLOAD = {
    "userId": "u1",
    "context": {
        "userAgent": "Mozilla",
        "clientIds": {"ga4": {"clientId": "c1", "sessionIds": "{}"}},
        "page": {"screenResolution": "1920x1080"},
    },
    "items": [{"productId": 1}, {"productId": 2, "variants": [{"skuCode": "A"}]}],
    "plain": "keepMeAsIs",
}


# =============================================================================
# TEST CLASSES
# =============================================================================


class TestToSnakeCase:
    """Tests for to_snake_case."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("userId", "user_id"),
            ("userAgent", "user_agent"),
            ("screenResolution", "screen_resolution"),
            ("already_snake", "already_snake"),
            ("UserId", "user_id"),
            ("_timestamp", "_timestamp"),
            ("utm2Source", "utm2_source"),
            ("HTMLParser", "h_t_m_l_parser"),
            ("", ""),
        ],
    )
    def test_conversion(self, key, expected):
        """Should insert underscores before uppercase letters after alphanumerics."""
        assert to_snake_case(key) == expected

    def test_leading_uppercase_not_prefixed(self):
        """An uppercase first letter has nothing before it, so no underscore."""
        assert to_snake_case("Name") == "name"

    def test_uppercase_after_underscore_not_doubled(self):
        """Only letters and digits trigger an underscore."""
        assert to_snake_case("user_Id") == "user_id"


class TestNormalizeKeys:
    """Tests for normalize_keys."""

    def test_nested_mappings_and_lists(self):
        """Should rewrite keys at every depth."""
        result = normalize_keys(NESTED_PAYLOAD)

        assert result["user_id"] == "u1"
        assert result["context"]["user_agent"] == "Mozilla"
        assert result["context"]["client_ids"]["ga4"]["client_id"] == "c1"
        assert result["context"]["page"]["screen_resolution"] == "1920x1080"
        assert result["items"][0] == {"product_id": 1}
        assert result["items"][1]["variants"] == [{"sku_code": "A"}]

    def test_values_untouched(self):
        """String values are never rewritten."""
        assert normalize_keys(NESTED_PAYLOAD)["plain"] == "keepMeAsIs"

    def test_scalars_pass_through(self):
        """Scalars and None should be returned as-is."""
        for value in ("text", 1, 2.5, True, None):
            assert normalize_keys(value) == value

    def test_sequence_preserves_order_and_length(self):
        """Sequences keep order and length."""
        result = normalize_keys([{"aB": 1}, 2, None, [{"cD": 3}]])
        assert result == [{"a_b": 1}, 2, None, [{"c_d": 3}]]

    def test_idempotent(self):
        """Normalizing twice equals normalizing once."""
        once = normalize_keys(NESTED_PAYLOAD)
        assert normalize_keys(once) == once

    def test_does_not_mutate_input(self):
        """Input mapping should be left untouched."""
        original = copy.deepcopy(NESTED_PAYLOAD)
        normalize_keys(NESTED_PAYLOAD)
        assert NESTED_PAYLOAD == original


class TestStripAbsent:
    """Tests for strip_absent."""

    def test_removes_absent_entries(self):
        """ABSENT mapping values are dropped."""
        assert strip_absent({"a": 1, "b": ABSENT}) == {"a": 1}

    def test_keeps_none(self):
        """Explicit null is a value, not an absence."""
        assert strip_absent({"a": None, "b": ABSENT}) == {"a": None}

    def test_recurses(self):
        """Nested mappings, also inside lists, are pruned."""
        value = {"outer": {"inner": ABSENT, "keep": 0}, "list": [{"x": ABSENT, "y": 1}]}
        assert strip_absent(value) == {"outer": {"keep": 0}, "list": [{"y": 1}]}

    def test_sequence_elements_retained(self):
        """ABSENT elements inside sequences are not removed."""
        result = strip_absent([1, ABSENT, 2])
        assert len(result) == 3
        assert result[1] is ABSENT

    def test_keys_untouched(self):
        """Keys are not normalized by stripping."""
        assert strip_absent({"userId": "u1"}) == {"userId": "u1"}

    def test_idempotent(self):
        """Stripping twice equals stripping once."""
        value = {"a": ABSENT, "b": {"c": ABSENT, "d": [ABSENT, {"e": ABSENT}]}}
        once = strip_absent(value)
        assert strip_absent(once) == once

    def test_commutes_with_normalization(self):
        """Strip-then-normalize equals normalize-then-strip."""
        value = {"userId": ABSENT, "userName": "Ann", "nestedObj": {"innerKey": ABSENT}}
        assert strip_absent(normalize_keys(value)) == normalize_keys(strip_absent(value))


class TestAbsentSentinel:
    """Tests for the ABSENT sentinel."""

    def test_is_falsy(self):
        """ABSENT behaves as a missing value in 'or' chains."""
        assert not ABSENT
        assert (ABSENT or "fallback") == "fallback"

    def test_distinct_from_none(self):
        """ABSENT is not None."""
        assert ABSENT is not None

    def test_survives_copy(self):
        """Copies of ABSENT are ABSENT."""
        assert copy.deepcopy(ABSENT) is ABSENT
        assert copy.copy(ABSENT) is ABSENT

    def test_repr(self):
        """Readable repr for debugging."""
        assert repr(ABSENT) == "ABSENT"


class TestRecordHelpers:
    """Tests for omit, merge and get_value."""

    def test_omit(self):
        """Should drop the named keys only."""
        assert omit({"a": 1, "b": 2, "c": 3}, "a", "c") == {"b": 2}

    def test_omit_missing_mapping(self):
        """None is treated as an empty mapping."""
        assert omit(None, "a") == {}

    def test_omit_returns_copy(self):
        """The source mapping is not modified."""
        source = {"a": 1}
        result = omit(source)
        result["b"] = 2
        assert source == {"a": 1}

    def test_merge_later_wins(self):
        """Later sources override earlier ones."""
        assert merge({"a": 1, "b": 1}, {"b": 2}, {"c": 3}) == {"a": 1, "b": 2, "c": 3}

    def test_merge_skips_missing_sources(self):
        """None and ABSENT sources contribute nothing."""
        assert merge(None, {"a": 1}, ABSENT, {}) == {"a": 1}

    def test_merge_absent_value_never_wins(self):
        """A later ABSENT value keeps the earlier present value."""
        assert merge({"referer": "r-prop"}, {"referer": ABSENT, "src": "x"}) == {
            "referer": "r-prop",
            "src": "x",
        }

    def test_merge_skips_non_mapping_sources(self):
        """Free-form scalars and lists are not merged."""
        assert merge("text", [("a", 1)], 42, {"b": 2}) == {"b": 2}

    def test_omit_non_mapping(self):
        assert omit("text", "a") == {}

    def test_get_value(self):
        """Missing keys and missing mappings give ABSENT; null stays null."""
        assert get_value({"a": 1}, "a") == 1
        assert get_value({"a": None}, "a") is None
        assert get_value({}, "a") is ABSENT
        assert get_value(None, "a") is ABSENT
