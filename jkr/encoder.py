# -*- coding: utf-8 -*-
"""Location: ./jkr/encoder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Table literal encoder.

Turns a table into the literal text stored inside a jkr file::

    return {["foo"]="bar",[1]=42,["nested"]={["flag"]=true,},}

Every entry is written as ``[key]=value,``. Strings are always written with
double quotes and every byte outside printable ASCII is escaped, so the
produced text is pure ASCII. Entry order follows the mapping's iteration
order and carries no meaning.

Examples:
    >>> from jkr.encoder import dumps
    >>> dumps({})
    'return {}'
    >>> dumps({"foo": "bar"})
    'return {["foo"]="bar",}'
    >>> dumps({1: 42})
    'return {[1]=42,}'
    >>> dumps({"nested": {"a": 1, "b": 2.5}})
    'return {["nested"]={["a"]=1,["b"]=2.5,},}'
"""

# Standard
import math
from typing import Any, List, Optional, Set, Tuple

# First-Party
from jkr.config import settings
from jkr.constants import INTEGER_FORMAT_LIMIT, PLACEHOLDER_TEXT, RETURN_KEYWORD
from jkr.errors import CyclicReference, InvalidKeyType, NestingTooDeep, UnsupportedValueType
from jkr.logging_service import get_logger
from jkr.values import is_number, is_placeholder, is_string, is_table, normalize_string, Table

logger = get_logger(__name__)

# Control bytes with a single-letter escape.
_NAMED_ESCAPES = {
    0x07: "\\a",
    0x08: "\\b",
    0x0C: "\\f",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
    0x0B: "\\v",
    0x22: '\\"',
    0x5C: "\\\\",
}


def _build_escape_table() -> Tuple[str, ...]:
    """Precompute the literal form of every byte value.

    Returns:
        Tuple of 256 strings indexed by byte value.
    """
    table = []
    for byte in range(256):
        if byte in _NAMED_ESCAPES:
            table.append(_NAMED_ESCAPES[byte])
        elif 0x20 <= byte <= 0x7E:
            table.append(chr(byte))
        else:
            table.append(f"\\x{byte:02x}")
    return tuple(table)


_ESCAPE_TABLE = _build_escape_table()


def quote_string(value: Any) -> str:
    """Quote and escape a string value.

    Args:
        value: ``str``, ``bytes`` or ``bytearray``.

    Returns:
        Double-quoted ASCII literal.

    Examples:
        >>> quote_string("bar")
        '"bar"'
        >>> print(quote_string('say "hi"\\n'))
        "say \\"hi\\"\\n"
        >>> print(quote_string("caf\\u00e9"))
        "caf\\xc3\\xa9"
        >>> print(quote_string(b"\\x00\\x7f"))
        "\\x00\\x7f"
    """
    return '"' + "".join(_ESCAPE_TABLE[byte] for byte in normalize_string(value)) + '"'


def format_number(value: Any) -> Optional[str]:
    """Format a number as the shortest text that reads back to the same float.

    Integral values are written without a fractional part.

    Args:
        value: ``int`` or ``float``.

    Returns:
        Number literal, or None if the value has no literal form (NaN,
        infinities and integers beyond the float range).

    Examples:
        >>> format_number(42)
        '42'
        >>> format_number(42.0)
        '42'
        >>> format_number(-0.5)
        '-0.5'
        >>> format_number(0.1)
        '0.1'
        >>> format_number(1e300)
        '1e+300'
        >>> format_number(1.5e-07)
        '1.5e-07'
        >>> format_number(float("inf")) is None
        True
    """
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer() and -INTEGER_FORMAT_LIMIT <= number < INTEGER_FORMAT_LIMIT:
        return str(int(number))
    return repr(number)


def _encode_key(key: Any, path: Tuple[Any, ...]) -> str:
    """Encode a table key.

    Args:
        key: Key to encode.
        path: Keys leading to the table holding the key.

    Returns:
        Bracketed key literal.

    Raises:
        InvalidKeyType: If the key is not a string or finite number.
    """
    if is_string(key):
        return f"[{quote_string(key)}]"
    if is_number(key):
        text = format_number(key)
        if text is not None:
            return f"[{text}]"
    raise InvalidKeyType(key, path)


def _encode_value(key: Any, value: Any, visiting: Set[int], path: Tuple[Any, ...], max_depth: int) -> str:
    """Encode a table value.

    Args:
        key: Key of the entry, for error reporting.
        value: Value to encode.
        visiting: Identities of the tables currently being encoded.
        path: Keys leading to the table holding the entry.
        max_depth: Deepest nesting allowed.

    Returns:
        Value literal.

    Raises:
        UnsupportedValueType: If the value has no literal form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        text = format_number(value)
        if text is None:
            raise UnsupportedValueType(key, value, path, reason="number has no finite float64 form")
        return text
    if is_string(value):
        return quote_string(value)
    if is_table(value):
        if is_placeholder(value):
            logger.debug(f"Replacing object table at {path + (key,)!r} with placeholder")
            return quote_string(PLACEHOLDER_TEXT)
        return _encode_table(value, visiting, path + (key,), max_depth)
    raise UnsupportedValueType(key, value, path)


def _encode_table(table: Table, visiting: Set[int], path: Tuple[Any, ...], max_depth: int) -> str:
    """Encode one table and, recursively, its nested tables.

    Args:
        table: Table to encode.
        visiting: Identities of the tables currently being encoded.
        path: Keys leading from the root to this table.
        max_depth: Deepest nesting allowed.

    Returns:
        Braced table literal.

    Raises:
        CyclicReference: If the table is already being encoded further up.
        NestingTooDeep: If the table is nested deeper than ``max_depth``.
    """
    identity = id(table)
    if identity in visiting:
        raise CyclicReference(path)
    if len(path) >= max_depth:
        raise NestingTooDeep(max_depth, path)

    visiting.add(identity)
    try:
        parts: List[str] = ["{"]
        for key, value in table.items():
            parts.append(_encode_key(key, path))
            parts.append("=")
            parts.append(_encode_value(key, value, visiting, path, max_depth))
            parts.append(",")
        parts.append("}")
        return "".join(parts)
    finally:
        visiting.discard(identity)


def dumps(table: Table, *, max_depth: Optional[int] = None) -> str:
    """Encode a table as jkr literal text.

    Args:
        table: Root table.
        max_depth: Deepest nesting allowed; defaults to ``Settings.max_depth``.

    Returns:
        ``return {...}`` literal text (ASCII only).

    Raises:
        UnsupportedValueType: If the root is not a table, or any value has no literal form.
        InvalidKeyType: If any key is not a string or number.
        CyclicReference: If any table contains itself.
        NestingTooDeep: If tables nest deeper than ``max_depth`` or than the interpreter stack allows.

    Examples:
        >>> dumps({"foo": {"is": print}})
        'return {["foo"]="MANUAL_REPLACE",}'
        >>> t = {}
        >>> t["self"] = t
        >>> dumps(t)
        Traceback (most recent call last):
            ...
        jkr.errors.CyclicReference: circular reference detected in table at ["self"]
    """
    if not is_table(table):
        raise UnsupportedValueType(None, table, reason="the root value must be a table")
    if max_depth is None:
        max_depth = settings.max_depth
    try:
        body = _encode_table(table, set(), (), max_depth)
    except RecursionError as e:
        raise NestingTooDeep(max_depth) from e
    text = f"{RETURN_KEYWORD} {body}"
    logger.debug(f"Encoded table literal: {len(text)} characters")
    return text


def encode_literal(table: Table, *, max_depth: Optional[int] = None) -> bytes:
    """Encode a table as jkr literal bytes.

    Args:
        table: Root table.
        max_depth: Deepest nesting allowed; defaults to ``Settings.max_depth``.

    Returns:
        ASCII bytes of the literal text.

    Examples:
        >>> encode_literal({"flag": False})
        b'return {["flag"]=false,}'
    """
    return dumps(table, max_depth=max_depth).encode("ascii")
