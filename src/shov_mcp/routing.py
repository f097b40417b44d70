"""Argument routing: split tool arguments into path, query, and body parts."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

from shov_mcp.types import ClassifiedArguments

QUERY_METHODS = frozenset({"GET", "DELETE"})

# Characters encodeURIComponent leaves alone besides the unreserved set.
_PATH_SAFE = "!~*'()"


def stringify(value: Any) -> str:
    """Render an argument value the way it appears in a URL.

    Strings pass through, booleans and None use their JSON spelling,
    and containers are serialized as compact JSON.
    """
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def encode_path_value(value: Any) -> str:
    """Percent-encode a value for substitution into a URL path segment."""
    return quote(stringify(value), safe=_PATH_SAFE)


def placeholder(key: str) -> str:
    return "{" + key + "}"


def classify_arguments(
    url_template: str,
    method: str,
    arguments: dict[str, Any],
) -> ClassifiedArguments:
    """Partition arguments for one HTTP call.

    Walks arguments in caller order. A key whose delimited placeholder
    ``{key}`` occurs in the template is substituted into the URL, regardless
    of method. Remaining keys become query parameters for GET and DELETE,
    body fields for every other method.

    Args:
        url_template: Handler URL, possibly containing ``{name}`` placeholders.
        method: HTTP method of the handler.
        arguments: Caller-supplied arguments.

    Returns:
        ClassifiedArguments with the resolved URL and the three partitions.
    """
    method = method.upper()
    result = ClassifiedArguments(url=url_template)

    for key, value in arguments.items():
        marker = placeholder(key)
        if marker in result.url:
            result.path[key] = value
            # Substituted values have their braces encoded, so they cannot
            # introduce placeholders for later keys.
            result.url = result.url.replace(marker, encode_path_value(value))
        elif method in QUERY_METHODS:
            result.query[key] = value
        else:
            result.body[key] = value

    return result
