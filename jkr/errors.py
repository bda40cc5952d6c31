# -*- coding: utf-8 -*-
"""Location: ./jkr/errors.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Codec exceptions.
Every failure of the codec is reported as a subclass of ``JkrError``:

- ``EncodeError`` and its subclasses are raised while turning a table into literal text.
- ``DecodeError`` and its subclasses are raised while parsing literal text.
- ``FramingError`` is raised when the DEFLATE stream cannot be produced or consumed.

Examples:
    >>> from jkr.errors import CyclicReference, EncodeError, FramingError, DecodeError
    >>> err = CyclicReference(path=("a", 1.0))
    >>> str(err)
    'circular reference detected in table at ["a"][1]'
    >>> isinstance(err, EncodeError)
    True
    >>> issubclass(FramingError, DecodeError) and issubclass(FramingError, EncodeError)
    True
"""

# Standard
from typing import Any, Optional, Tuple


def format_path(path: Tuple[Any, ...]) -> str:
    """Render a key path the way it would appear in literal text.

    Args:
        path: Keys leading from the root table to a nested table.

    Returns:
        str: Bracketed path, or ``<root>`` for the empty path.

    Examples:
        >>> format_path(())
        '<root>'
        >>> format_path(("game", 2, "cards"))
        '["game"][2]["cards"]'
        >>> format_path((b"raw", 1.5))
        '["raw"][1.5]'
    """
    if not path:
        return "<root>"
    parts = []
    for key in path:
        if isinstance(key, bytes):
            key = key.decode("utf-8", errors="replace")
        if isinstance(key, str):
            parts.append(f'["{key}"]')
        elif isinstance(key, float) and key.is_integer():
            parts.append(f"[{int(key)}]")
        else:
            parts.append(f"[{key!r}]")
    return "".join(parts)


class JkrError(Exception):
    """Base class for all codec errors.

    Examples:
        >>> err = JkrError("Something went wrong")
        >>> str(err)
        'Something went wrong'
    """


class EncodeError(JkrError):
    """Raised when a table cannot be turned into literal text.

    Attributes:
        path: Keys leading to the table where encoding stopped.

    Examples:
        >>> err = EncodeError("encoding failed", path=("a",))
        >>> err.path
        ('a',)
        >>> isinstance(err, JkrError)
        True
    """

    def __init__(self, message: str, path: Tuple[Any, ...] = ()):
        """Initialize the error.

        Args:
            message: Human readable description.
            path: Keys leading to the table where encoding stopped.
        """
        self.path = tuple(path)
        super().__init__(message)


class CyclicReference(EncodeError):
    """Raised when a table directly or transitively contains itself."""

    def __init__(self, path: Tuple[Any, ...] = ()):
        """Initialize the error.

        Args:
            path: Keys leading to the entry that points back to an open table.
        """
        super().__init__(f"circular reference detected in table at {format_path(path)}", path)


class InvalidKeyType(EncodeError):
    """Raised when a table key is neither a string nor a finite number.

    Examples:
        >>> err = InvalidKeyType(True, path=("jokers",))
        >>> str(err)
        'invalid key type bool in table at ["jokers"]: table keys must be strings or numbers'
        >>> err.key
        True
    """

    def __init__(self, key: Any, path: Tuple[Any, ...] = ()):
        """Initialize the error.

        Args:
            key: The offending key.
            path: Keys leading to the table holding the key.
        """
        self.key = key
        super().__init__(
            f"invalid key type {type(key).__name__} in table at {format_path(path)}: table keys must be strings or numbers",
            path,
        )


class UnsupportedValueType(EncodeError):
    """Raised when a value has no literal representation.

    Examples:
        >>> err = UnsupportedValueType("foo", None)
        >>> str(err)
        'unsupported value type NoneType for key ["foo"]'
        >>> err.value_type
        'NoneType'
    """

    def __init__(self, key: Any, value: Any, path: Tuple[Any, ...] = (), reason: Optional[str] = None):
        """Initialize the error.

        Args:
            key: Key whose value could not be encoded.
            value: The offending value.
            path: Keys leading to the table holding the entry.
            reason: Optional extra detail appended to the message.
        """
        self.key = key
        self.value_type = type(value).__name__
        message = f"unsupported value type {self.value_type} for key {format_path(tuple(path) + (key,))}"
        if reason:
            message += f": {reason}"
        super().__init__(message, path)


class NestingTooDeep(EncodeError):
    """Raised when tables nest deeper than the configured limit."""

    def __init__(self, depth: int, path: Tuple[Any, ...] = ()):
        """Initialize the error.

        Args:
            depth: The configured maximum depth.
            path: Keys leading to the table that exceeded it.
        """
        self.depth = depth
        super().__init__(f"table nesting exceeds {depth} levels at {format_path(path)}", path)


class DecodeError(JkrError):
    """Raised when literal text cannot be turned into a table.

    Attributes:
        position: Byte offset into the literal text.
        line: 1-based line of ``position``.
        column: 1-based column of ``position``.

    Examples:
        >>> err = DecodeError("bad input", position=7, line=2, column=3)
        >>> str(err)
        'bad input (line 2, column 3, offset 7)'
        >>> err.position
        7
    """

    def __init__(self, message: str, position: Optional[int] = None, line: Optional[int] = None, column: Optional[int] = None):
        """Initialize the error.

        Args:
            message: Human readable description.
            position: Byte offset into the literal text, if known.
            line: 1-based line number, if known.
            column: 1-based column number, if known.
        """
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        if position is not None and line is not None:
            message = f"{message} (line {line}, column {column}, offset {position})"
        elif position is not None:
            message = f"{message} (offset {position})"
        super().__init__(message)


class MalformedLiteral(DecodeError):
    """Raised when literal text violates the table literal grammar.

    Examples:
        >>> err = MalformedLiteral("unexpected character '@'", position=0, line=1, column=1)
        >>> isinstance(err, DecodeError)
        True
    """


class NotATable(DecodeError):
    """Raised when the top-level expression is a valid literal that is not a table."""


class FramingError(EncodeError, DecodeError):
    """Raised when the DEFLATE stream is truncated, corrupt or over the size limit.

    Examples:
        >>> err = FramingError("compressed stream is truncated")
        >>> str(err)
        'compressed stream is truncated'
        >>> isinstance(err, EncodeError) and isinstance(err, DecodeError)
        True
    """

    def __init__(self, message: str):
        """Initialize the error.

        Args:
            message: Human readable description.
        """
        self.path = ()
        self.message = message
        self.position = None
        self.line = None
        self.column = None
        JkrError.__init__(self, message)
