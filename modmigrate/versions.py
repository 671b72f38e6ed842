"""Schema version parsing and comparison.

Versions are dotted numeric strings ("4.24", "3.0.47") compared the way
package versions are. Saved content occasionally carries strings that are
not valid versions, so parsing never raises on the render path.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

_NUMERIC_PREFIX = re.compile(r"^\s*v?(\d+(?:\.\d+)*)")


@lru_cache(maxsize=256)
def parse_version(value: str) -> Version:
    """Parse a schema version, coercing malformed strings.

    Args:
        value: Version string as saved in module attributes

    Returns:
        Comparable Version. Strings without a numeric prefix become ``0``.
    """
    try:
        return Version(value)
    except InvalidVersion:
        match = _NUMERIC_PREFIX.match(value)
        coerced = match.group(1) if match else "0"
        logger.warning(f"Coerced malformed schema version '{value}' to '{coerced}'")
        return Version(coerced)


def is_valid_version(value: str) -> bool:
    """Check whether a string is a well-formed version."""
    try:
        Version(value)
    except InvalidVersion:
        return False
    return True


def version_lt(left: str, right: str) -> bool:
    return parse_version(left) < parse_version(right)


def version_gte(left: str, right: str) -> bool:
    return parse_version(left) >= parse_version(right)
