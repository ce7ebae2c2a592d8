r"""Helpers to prepare request parameters and headers.

This module flattens nested parameters into the bracket notation used by
the API (``a[b]=1``, ``a[0]=x``), form-encodes them, replaces resource
objects with their identifiers, and reconciles query strings embedded in
a request path with explicitly supplied query parameters.
"""

from __future__ import annotations

__all__ = [
    "encode_parameters",
    "flatten_params",
    "is_multipart",
    "merge_path_query",
    "normalize_headers",
    "objects_to_ids",
    "stringify",
    "url_encode",
]

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, quote_plus, urlsplit

from supercast.resource import APIResource


def stringify(value: Any) -> str:
    r"""Convert a scalar parameter value to its wire representation.

    Example:
        ```pycon
        >>> from supercast.utils.params import stringify
        >>> stringify(True), stringify(None), stringify(3)
        ('true', '', '3')

        ```
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def url_encode(value: Any) -> str:
    r"""Form-encode a key or a value.

    Brackets are left literal so that nested keys stay readable.

    Example:
        ```pycon
        >>> from supercast.utils.params import url_encode
        >>> url_encode("metadata[a b]")
        'metadata[a+b]'

        ```
    """
    return quote_plus(stringify(value), safe="[]")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def flatten_params(params: Mapping[str, Any], parent_key: str | None = None) -> list[tuple[str, Any]]:
    r"""Flatten nested parameters into ``(key, value)`` pairs.

    Mappings are expanded with ``parent[key]`` and sequences with
    ``parent[index]``. Insertion and sequence order are preserved.

    Args:
        params: The parameters to flatten.
        parent_key: The key of the enclosing structure, if any.

    Returns:
        The flattened pairs. Values are left unconverted.

    Example:
        ```pycon
        >>> from supercast.utils.params import flatten_params
        >>> flatten_params({"a": [1, 2], "b": {"c": 3}})
        [('a[0]', 1), ('a[1]', 2), ('b[c]', 3)]

        ```
    """
    result: list[tuple[str, Any]] = []
    for key, value in params.items():
        calculated_key = f"{parent_key}[{key}]" if parent_key else str(key)
        if isinstance(value, Mapping):
            result.extend(flatten_params(value, calculated_key))
        elif _is_sequence(value):
            result.extend(_flatten_params_array(value, calculated_key))
        else:
            result.append((calculated_key, value))
    return result


def _flatten_params_array(values: list | tuple, calculated_key: str) -> list[tuple[str, Any]]:
    result: list[tuple[str, Any]] = []
    for index, elem in enumerate(values):
        elem_key = f"{calculated_key}[{index}]"
        if isinstance(elem, Mapping):
            result.extend(flatten_params(elem, elem_key))
        elif _is_sequence(elem):
            result.extend(_flatten_params_array(elem, elem_key))
        else:
            result.append((elem_key, elem))
    return result


def encode_parameters(params: Mapping[str, Any]) -> str:
    r"""Encode nested parameters as an ``application/x-www-form-urlencoded``
    string.

    Example:
        ```pycon
        >>> from supercast.utils.params import encode_parameters
        >>> encode_parameters({"a": [1, 2], "b": {"c": 3}})
        'a[0]=1&a[1]=2&b[c]=3'

        ```
    """
    return "&".join(f"{url_encode(key)}={url_encode(value)}" for key, value in flatten_params(params))


def is_multipart(params: Mapping[str, Any] | None) -> bool:
    r"""Return whether the parameters contain a file-like value."""
    if not params:
        return False
    return any(hasattr(value, "read") for _, value in flatten_params(params))


def objects_to_ids(value: Any) -> Any:
    r"""Replace resource objects nested in ``value`` with their identifiers.

    ``None`` values of mappings are dropped.

    Example:
        ```pycon
        >>> from supercast.resource import APIResource
        >>> from supercast.utils.params import objects_to_ids
        >>> objects_to_ids({"episode": APIResource(id=7), "tags": ["a"], "skip": None})
        {'episode': 7, 'tags': ['a']}

        ```
    """
    if isinstance(value, APIResource):
        return value.id
    if isinstance(value, Mapping):
        return {key: objects_to_ids(item) for key, item in value.items() if item is not None}
    if _is_sequence(value):
        return [objects_to_ids(item) for item in value]
    return value


def normalize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    r"""Normalize header names to ``Header-Case``.

    Example:
        ```pycon
        >>> from supercast.utils.params import normalize_headers
        >>> normalize_headers({"idempotency_key": "k", "supercast-account": "acct"})
        {'Idempotency-Key': 'k', 'Supercast-Account': 'acct'}

        ```
    """
    if not headers:
        return {}
    return {
        "-".join(part.capitalize() for part in str(key).replace("_", "-").split("-")): value
        for key, value in headers.items()
    }


def merge_path_query(
    path: str, query_params: Mapping[str, Any] | None
) -> tuple[str, dict[str, Any] | None]:
    r"""Move the query string of ``path`` into the query parameters.

    Parameters supplied explicitly take precedence over the ones found in
    the path.

    Args:
        path: The request path, possibly with a query string.
        query_params: The explicit query parameters, if any.

    Returns:
        The path without its query string, and the merged parameters
        (``None`` if there are none at all).

    Example:
        ```pycon
        >>> from supercast.utils.params import merge_path_query
        >>> merge_path_query("/episodes?limit=5&page=2", {"limit": 10})
        ('/episodes', {'limit': 10, 'page': '2'})

        ```
    """
    parts = urlsplit(path)
    if not parts.query:
        return path, dict(query_params) if query_params is not None else None
    merged: dict[str, Any] = dict(parse_qsl(parts.query, keep_blank_values=True))
    merged.update(query_params or {})
    return parts.path, merged
