"""
KITS — Network Helpers

IPv4 conversions and URL parsing.
"""

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from kits.shared.errors import InvalidIPAddressError


# =============================================================================
# IPv4
# =============================================================================
_OCTET = r"([01]?[0-9][0-9]?|2[0-4][0-9]|25[0-5])"
_IPV4_RE = re.compile(rf"{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}")


def is_ip_address_v4(s: Optional[str]) -> Optional[bool]:
    """Test if `s` is a valid dotted IPv4 address (None for None)."""
    if s is None:
        return None
    return _IPV4_RE.fullmatch(s) is not None


def ip_to_integer(dotted: str) -> int:
    """
    Convert a dotted IPv4 address to a 32-bit integer.

        ip_to_integer("127.0.0.1") => 2130706433
    """
    if not isinstance(dotted, str) or not is_ip_address_v4(dotted):
        raise InvalidIPAddressError(dotted)
    b1, b2, b3, b4 = (int(o) for o in dotted.split("."))
    return (b1 << 24) | (b2 << 16) | (b3 << 8) | b4


def ip_to_dotted(ip: int) -> str:
    """
    Convert a 32-bit integer to a dotted IPv4 address.

        ip_to_dotted(2130706433) => "127.0.0.1"
    """
    return "%d.%d.%d.%d" % (
        (ip >> 24) & 0xFF,
        (ip >> 16) & 0xFF,
        (ip >> 8) & 0xFF,
        ip & 0xFF,
    )


# =============================================================================
# URLs
# =============================================================================
def to_url(s: Optional[str]) -> Optional[SplitResult]:
    """Split `s` into URL parts, or None if it has no scheme or is malformed."""
    if not s:
        return None
    try:
        parts = urlsplit(s)
        # Touch the port so bad values surface here rather than later.
        parts.port
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return parts


def is_url(s: Optional[str]) -> bool:
    return to_url(s) is not None


def parse_url(spec: Optional[str]) -> Optional[dict]:
    """
    Parse a URL into a dict of its non-empty parts.

    Keys: scheme, username, password, host, path, query. A URL without
    "://" is taken as a file path.

        parse_url("mysql://bob:pw@db.local/app?ssl=1")
        => {"scheme": "mysql", "username": "bob", "password": "pw",
            "host": "db.local", "path": "/app", "query": "ssl=1"}
    """
    if not spec:
        return None

    if "://" in spec:
        scheme, rest = spec.split("://", 1)
    else:
        scheme, rest = "file", spec

    raw_host, _, raw_path = rest.partition("/")
    raw_path = "/" + raw_path

    credentials, _, host = raw_host.rpartition("@")
    username, _, password = credentials.partition(":")

    path, _, query = raw_path.partition("?")

    parts = {
        "scheme": scheme,
        "username": username,
        "password": password,
        "host": host,
        "path": path,
        "query": query,
    }
    return {key: value for key, value in parts.items() if value}
