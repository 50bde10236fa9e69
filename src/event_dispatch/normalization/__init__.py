"""Field-level normalization used by the data layouts."""

from .keys import (
    ABSENT,
    merge,
    normalize_keys,
    omit,
    strip_absent,
    to_snake_case,
)
from .privacy import anonymize_ip
from .urls import UrlParts, parse_page_url

__all__ = [
    "ABSENT",
    "UrlParts",
    "anonymize_ip",
    "merge",
    "normalize_keys",
    "omit",
    "parse_page_url",
    "strip_absent",
    "to_snake_case",
]
