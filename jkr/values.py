# -*- coding: utf-8 -*-
"""Location: ./jkr/values.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Value model of the jkr format.

A save file holds one table. Its values map onto plain Python objects:

============  ==========================================  =====================
Kind          Accepted when encoding                      Produced by decoding
============  ==========================================  =====================
Boolean       ``bool``                                    ``bool``
Number        ``int``, ``float`` (never ``bool``)         ``float``
String        ``str``, ``bytes``, ``bytearray``           ``str``
Table         any ``Mapping``                             ``dict``
============  ==========================================  =====================

``None`` (Nil) is not storable. Strings are byte sequences on disk; ``str``
values are bridged with UTF-8 and ``surrogateescape`` so bytes that are not
valid UTF-8 still round-trip exactly.

Examples:
    >>> is_number(3) and is_number(2.5)
    True
    >>> is_number(True)
    False
    >>> structurally_equal({"a": 1, "b": {"c": True}}, {"b": {"c": True}, "a": 1.0})
    True
"""

# Standard
from collections.abc import Mapping
from typing import Any, Dict, Union

# First-Party
from jkr.constants import PLACEHOLDER_MARKER_KEY

Key = Union[str, bytes, int, float]
Value = Union[bool, int, float, str, bytes, "Table"]
Table = Mapping

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def is_table(value: Any) -> bool:
    """Check if value is a table.

    Args:
        value: Value to check.

    Returns:
        True if value is a mapping.

    Examples:
        >>> is_table({})
        True
        >>> is_table([])
        False
    """
    return isinstance(value, Mapping)


def is_number(value: Any) -> bool:
    """Check if value is a number, excluding booleans.

    Args:
        value: Value to check.

    Returns:
        True for ``int`` and ``float`` that are not ``bool``.
    """
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    """Check if value is a string in either text or byte form.

    Args:
        value: Value to check.

    Returns:
        True for ``str``, ``bytes`` and ``bytearray``.
    """
    return isinstance(value, (str, bytes, bytearray))


def is_placeholder(table: Any) -> bool:
    """Check if a table is an opaque object that must not be serialized.

    Game objects carry a method under the ``"is"`` key. Such tables are
    replaced by a placeholder string instead of being walked.

    Args:
        table: Table to check.

    Returns:
        True if the table has a callable ``"is"`` entry.

    Examples:
        >>> is_placeholder({"is": lambda other: False})
        True
        >>> is_placeholder({"is": "a plain string"})
        False
        >>> is_placeholder({"name": "Joker"})
        False
    """
    if not is_table(table):
        return False
    return callable(table.get(PLACEHOLDER_MARKER_KEY))


def normalize_string(value: Union[str, bytes, bytearray]) -> bytes:
    """Return the on-disk byte form of a string value.

    Args:
        value: Text or bytes.

    Returns:
        bytes: Raw bytes of the string.

    Examples:
        >>> normalize_string("caf\\u00e9")
        b'caf\\xc3\\xa9'
        >>> normalize_string(b"\\xff")
        b'\\xff'
    """
    if isinstance(value, str):
        return value.encode(TEXT_ENCODING, TEXT_ERRORS)
    return bytes(value)


def to_text(raw: bytes) -> str:
    """Return the decoded form of raw string bytes.

    Args:
        raw: Bytes read from a string literal.

    Returns:
        str: Text, with invalid UTF-8 kept as lone surrogates.

    Examples:
        >>> to_text(b"caf\\xc3\\xa9")
        'café'
        >>> normalize_string(to_text(b"\\xff\\xfe")) == b"\\xff\\xfe"
        True
    """
    return raw.decode(TEXT_ENCODING, TEXT_ERRORS)


def _normalize_key(key: Any) -> Any:
    """Map equivalent keys onto one comparable form.

    Args:
        key: Table key.

    Returns:
        bytes for strings, float for numbers, the key itself otherwise.
    """
    if is_string(key):
        return normalize_string(key)
    if is_number(key):
        return float(key)
    return key


def _normalized_entries(table: Mapping) -> Dict[Any, Any]:
    """Index a table's values by normalized key.

    Args:
        table: Table to index.

    Returns:
        dict: Normalized key to original value.
    """
    return {_normalize_key(k): v for k, v in table.items()}


def structurally_equal(a: Any, b: Any) -> bool:
    """Compare two values ignoring key order and representation details.

    Numbers compare by float value, strings by their byte form and tables by
    their entries. Booleans only ever equal booleans.

    Args:
        a: First value.
        b: Second value.

    Returns:
        True if both values describe the same data.

    Examples:
        >>> structurally_equal({1: "x"}, {1.0: b"x"})
        True
        >>> structurally_equal({"a": True}, {"a": 1})
        False
        >>> structurally_equal({"a": {}}, {"a": {"b": 1}})
        False
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if is_number(a) and is_number(b):
        return float(a) == float(b)
    if is_string(a) and is_string(b):
        return normalize_string(a) == normalize_string(b)
    if is_table(a) and is_table(b):
        left = _normalized_entries(a)
        right = _normalized_entries(b)
        if left.keys() != right.keys():
            return False
        return all(structurally_equal(value, right[key]) for key, value in left.items())
    return False
