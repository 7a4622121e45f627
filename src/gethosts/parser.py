"""Host list parser and formatter.

Decodes the JSON payload served by the host inventory endpoint:

    {"Results": [{"Name": "web01"}, {"Name": "web02"}]}

and turns it into the plain-text form stored in the cache and printed by
the CLI: one host name per line, with a trailing newline.

Field names are matched case-insensitively (exact match wins), a missing
or null ``Results`` means no hosts, and a missing or null ``Name`` is an
empty name. Any type mismatch fails the whole payload.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from gethosts.exceptions import ParseError

logger = logging.getLogger(__name__)

RESULTS_FIELD = "Results"
NAME_FIELD = "Name"


@dataclass(frozen=True)
class HostRecord:
    """A single named host from the inventory payload."""

    name: str

    @classmethod
    def from_dict(cls, data: Any) -> "HostRecord":
        """Create from a decoded JSON record.

        Raises:
            ParseError: If the record is not an object or its name is not a string
        """
        if not isinstance(data, dict):
            raise ParseError(f"host record must be an object, got {type(data).__name__}")

        name = _lookup(data, NAME_FIELD)
        if name is None:
            name = ""
        if not isinstance(name, str):
            raise ParseError(f"host name must be a string, got {type(name).__name__}")
        return cls(name=name)


def _lookup(data: dict[str, Any], field: str) -> Any:
    """Get a field by exact name, falling back to a case-insensitive match."""
    if field in data:
        return data[field]

    folded = field.casefold()
    for key, value in data.items():
        if key.casefold() == folded:
            return value
    return None


def parse_records(data: bytes) -> list[HostRecord]:
    """Decode a payload into host records, preserving order.

    Args:
        data: Raw response body

    Returns:
        List of HostRecord in payload order

    Raises:
        ParseError: If the payload is not valid JSON or does not match the schema
    """
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"invalid JSON payload: {e}") from e

    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise ParseError(f"payload must be a JSON object, got {type(payload).__name__}")

    results = _lookup(payload, RESULTS_FIELD)
    if results is None:
        return []
    if not isinstance(results, list):
        raise ParseError(f"'{RESULTS_FIELD}' must be a list, got {type(results).__name__}")

    return [HostRecord.from_dict(item) for item in results]


def parse_hosts(data: bytes) -> list[str]:
    """Decode a payload into host names, preserving order.

    Raises:
        ParseError: If the payload is malformed
    """
    names = [record.name for record in parse_records(data)]
    logger.debug(f"Parsed {len(names)} hosts")
    return names


def format_hosts(names: list[str]) -> str:
    """Join host names one per line with a trailing newline.

    Examples:
        >>> format_hosts(["web01", "web02"])
        'web01\\nweb02\\n'
        >>> format_hosts([])
        ''
    """
    return "".join(f"{name}\n" for name in names)
