"""IP address anonymization for privacy-preserving storage."""

import re
from typing import Any

from .keys import ABSENT

_IPV4_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)\.([0-9]+)")


def anonymize_ip(ip: Any) -> Any:
    """
    Truncate an IPv4 address to its /24 network.

    Args:
        ip: Dotted-quad address string (e.g. "192.168.1.77")

    Returns:
        The address with the last octet set to 0, or ABSENT for anything that
        is not an ASCII dotted-quad decimal address (IPv6, malformed, missing).

    Example:
        >>> anonymize_ip("1.2.3.4")
        '1.2.3.0'
    """
    if not ip or not isinstance(ip, str):
        return ABSENT
    match = _IPV4_PATTERN.fullmatch(ip)
    if not match:
        return ABSENT
    return f"{match.group(1)}.{match.group(2)}.{match.group(3)}.0"
