# -*- coding: utf-8 -*-
"""Location: ./jkr/decoder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Table literal decoder.

A hand-written recursive-descent parser for the literal text stored inside a
jkr file. It accepts exactly one table literal, optionally preceded by the
``return`` keyword::

    Table     := "{" Entry* "}"
    Entry     := "[" Key "]" "=" Value ","      (final comma optional)
    Key       := StringLit | NumberLit
    Value     := Table | StringLit | BoolLit | NumberLit
    BoolLit   := "true" | "false"
    NumberLit := ["-"] Digits ["." Digits] [("e"|"E") ["+"|"-"] Digits]

Nothing is ever evaluated: names, calls, operators and comments are all
rejected. The parser works on the payload as bytes (each byte is one
character of a latin-1 view), so error positions are byte offsets.

Examples:
    >>> from jkr.decoder import loads
    >>> loads('return {["foo"]="bar",}')
    {'foo': 'bar'}
    >>> loads("return {[1]=42,}")
    {1.0: 42.0}
    >>> loads("{['nested']={['flag']=true}}")
    {'nested': {'flag': True}}
    >>> loads('return "foo"')
    Traceback (most recent call last):
        ...
    jkr.errors.NotATable: top-level expression is a string, not a table (line 1, column 8, offset 7)
"""

# Standard
import re
from typing import Any, Dict, List, Optional, Union

# First-Party
from jkr.config import settings
from jkr.constants import NIL_KEYWORD, RETURN_KEYWORD
from jkr.errors import DecodeError, MalformedLiteral, NotATable
from jkr.logging_service import get_logger
from jkr.values import Key, TEXT_ENCODING, TEXT_ERRORS, to_text, Value

logger = get_logger(__name__)

_WHITESPACE = frozenset(" \t\n\r\f\v")
_DECIMAL_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_NUMBER_TAIL = frozenset("0123456789.abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")

# Runs of characters that need no escape processing, per quote style.
_PLAIN_RUN = {
    '"': re.compile(r'[^"\\\r\n]+'),
    "'": re.compile(r"[^'\\\r\n]+"),
}

_SIMPLE_ESCAPES = {
    "a": "\x07",
    "b": "\x08",
    "f": "\x0c",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\x0b",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_MAX_CODE_POINT = 0x10FFFF


class _Parser:
    """Single-pass recursive-descent parser over a latin-1 view of the payload.

    Attributes:
        text: Payload, one character per byte.
        pos: Current offset.
        max_depth: Deepest table nesting accepted.
    """

    def __init__(self, text: str, max_depth: int):
        """Initialize the parser.

        Args:
            text: Payload, one character per byte.
            max_depth: Deepest table nesting accepted.
        """
        self.text = text
        self.pos = 0
        self.max_depth = max_depth

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _error(self, message: str, position: Optional[int] = None, error_cls: type = MalformedLiteral) -> DecodeError:
        """Build a decode error pointing at a position.

        Args:
            message: Human readable description.
            position: Offset of the problem; defaults to the current offset.
            error_cls: Error class to instantiate.

        Returns:
            DecodeError: The error, ready to raise.
        """
        pos = self.pos if position is None else position
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return error_cls(message, position=pos, line=line, column=column)

    def _describe_current(self) -> str:
        """Describe the character at the current offset for error messages.

        Returns:
            str: Quoted character or ``end of input``.
        """
        if self.pos >= len(self.text):
            return "end of input"
        return repr(self.text[self.pos])

    def _skip_whitespace(self) -> None:
        """Advance past whitespace."""
        text = self.text
        pos = self.pos
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        self.pos = pos

    def _peek(self) -> str:
        """Return the current character, or an empty string at the end.

        Returns:
            str: Current character.
        """
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, char: str, context: str) -> None:
        """Consume a required punctuation character.

        Args:
            char: Expected character.
            context: What the character is for, for error messages.

        Raises:
            MalformedLiteral: If the current character differs.
        """
        if self._peek() != char:
            raise self._error(f"expected '{char}' {context}, found {self._describe_current()}")
        self.pos += 1

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse_document(self) -> Dict[Key, Value]:
        """Parse the whole payload.

        Returns:
            dict: The root table.

        Raises:
            NotATable: If the payload holds a single non-table literal.
            MalformedLiteral: On any other grammar violation.
        """
        self._skip_whitespace()
        self._skip_return_keyword()
        self._skip_whitespace()

        start = self.pos
        if self._peek() == "{":
            root = self._parse_table(depth=1)
        else:
            match = _IDENTIFIER_RE.match(self.text, self.pos)
            if match and match.group() == NIL_KEYWORD:
                self.pos = match.end()
                value = None
            else:
                value = self._parse_scalar("expected a table literal")
            self._skip_whitespace()
            if self.pos < len(self.text):
                raise self._error(f"unexpected {self._describe_current()} after top-level expression")
            raise self._error(f"top-level expression is {_kind_name(value)}, not a table", start, NotATable)

        self._skip_whitespace()
        if self.pos < len(self.text):
            raise self._error(f"unexpected {self._describe_current()} after closing brace")
        return root

    def _skip_return_keyword(self) -> None:
        """Consume a leading ``return`` keyword if present."""
        match = _IDENTIFIER_RE.match(self.text, self.pos)
        if match and match.group() == RETURN_KEYWORD:
            self.pos = match.end()

    def _parse_table(self, depth: int) -> Dict[Key, Value]:
        """Parse a table literal starting at ``{``.

        Args:
            depth: Nesting level of this table, 1 for the root.

        Returns:
            dict: Parsed entries.

        Raises:
            MalformedLiteral: On a grammar violation or excessive nesting.
        """
        if depth > self.max_depth:
            raise self._error(f"table nesting exceeds {self.max_depth} levels")
        self._expect("{", "to open a table")
        result: Dict[Key, Value] = {}
        while True:
            self._skip_whitespace()
            char = self._peek()
            if char == "}":
                self.pos += 1
                return result
            if char != "[":
                raise self._error(f"expected '[' or '}}' in table, found {self._describe_current()}")
            self.pos += 1
            self._skip_whitespace()
            key = self._parse_key()
            self._skip_whitespace()
            self._expect("]", "to close a table key")
            self._skip_whitespace()
            self._expect("=", "after table key")
            self._skip_whitespace()
            result[key] = self._parse_value(depth)
            self._skip_whitespace()
            char = self._peek()
            if char == ",":
                self.pos += 1
            elif char == "}":
                self.pos += 1
                return result
            else:
                raise self._error(f"expected ',' or '}}' after table entry, found {self._describe_current()}")

    def _parse_key(self) -> Key:
        """Parse a string or number key.

        Returns:
            str or float: The key.

        Raises:
            MalformedLiteral: If the key is neither.
        """
        char = self._peek()
        if char in _PLAIN_RUN:
            return self._parse_string()
        if char == "-" or char in _DECIMAL_DIGITS:
            return self._parse_number()
        raise self._error(f"expected string or number key, found {self._describe_current()}")

    def _parse_value(self, depth: int) -> Value:
        """Parse an entry value.

        Args:
            depth: Nesting level of the table holding the value.

        Returns:
            The value.
        """
        if self._peek() == "{":
            return self._parse_table(depth + 1)
        return self._parse_scalar("expected a value")

    def _parse_scalar(self, context: str) -> Any:
        """Parse a string, number or boolean literal.

        Args:
            context: Error message prefix if nothing matches.

        Returns:
            str, float or bool.

        Raises:
            MalformedLiteral: If no literal starts here.
        """
        char = self._peek()
        if char in _PLAIN_RUN:
            return self._parse_string()
        if char == "-" or char in _DECIMAL_DIGITS:
            return self._parse_number()
        match = _IDENTIFIER_RE.match(self.text, self.pos)
        if match:
            word = match.group()
            if word == "true":
                self.pos = match.end()
                return True
            if word == "false":
                self.pos = match.end()
                return False
            raise self._error(f"unexpected name '{word}': only literal values are allowed")
        raise self._error(f"{context}, found {self._describe_current()}")

    def _parse_number(self) -> float:
        """Parse a number literal.

        Returns:
            float: The number.

        Raises:
            MalformedLiteral: If the text is not a well-formed number.
        """
        start = self.pos
        match = _NUMBER_RE.match(self.text, start)
        if not match or (match.end() < len(self.text) and self.text[match.end()] in _NUMBER_TAIL):
            raise self._error("malformed number", start)
        self.pos = match.end()
        return float(match.group())

    def _parse_string(self) -> str:
        """Parse a quoted string literal, decoding escapes.

        Returns:
            str: The string, decoded from its bytes as UTF-8 with surrogateescape.

        Raises:
            MalformedLiteral: On an unterminated string, a raw line break or a bad escape.
        """
        text = self.text
        start = self.pos
        quote = text[start]
        plain_run = _PLAIN_RUN[quote]
        chunks: List[str] = []
        pos = start + 1
        while True:
            match = plain_run.match(text, pos)
            if match:
                chunks.append(match.group())
                pos = match.end()
            if pos >= len(text):
                raise self._error("unterminated string", start)
            char = text[pos]
            if char == quote:
                self.pos = pos + 1
                return to_text("".join(chunks).encode("latin-1"))
            if char != "\\":
                raise self._error("unescaped line break in string", pos)
            pos = self._parse_escape(pos, chunks)

    def _parse_escape(self, pos: int, chunks: List[str]) -> int:
        """Decode one escape sequence starting at a backslash.

        Args:
            pos: Offset of the backslash.
            chunks: Output buffer of latin-1 characters.

        Returns:
            int: Offset just past the escape sequence.

        Raises:
            MalformedLiteral: If the escape sequence is unknown or malformed.
        """
        text = self.text
        if pos + 1 >= len(text):
            raise self._error("unterminated escape sequence", pos)
        esc = text[pos + 1]

        if esc in _SIMPLE_ESCAPES:
            chunks.append(_SIMPLE_ESCAPES[esc])
            return pos + 2

        if esc in "\r\n":
            # A backslash before a line break keeps the break; CRLF and LFCR count once.
            chunks.append("\n")
            end = pos + 2
            if end < len(text) and text[end] in "\r\n" and text[end] != esc:
                end += 1
            return end

        if esc == "x":
            digits = text[pos + 2 : pos + 4]
            if len(digits) != 2 or not all(d in _HEX_DIGITS for d in digits):
                raise self._error("invalid \\x escape: expected two hexadecimal digits", pos)
            chunks.append(chr(int(digits, 16)))
            return pos + 4

        if esc in _DECIMAL_DIGITS:
            end = pos + 1
            while end < len(text) and end < pos + 4 and text[end] in _DECIMAL_DIGITS:
                end += 1
            value = int(text[pos + 1 : end])
            if value > 255:
                raise self._error(f"decimal escape \\{value} is out of range", pos)
            chunks.append(chr(value))
            return end

        if esc == "u" and pos + 2 < len(text) and text[pos + 2] == "{":
            close = text.find("}", pos + 3)
            digits = text[pos + 3 : close] if close != -1 else ""
            if not digits or not all(d in _HEX_DIGITS for d in digits):
                raise self._error("invalid \\u{...} escape", pos)
            return self._append_code_point(int(digits, 16), pos, chunks, close + 1)

        if esc in "uU":
            width = 4 if esc == "u" else 8
            digits = text[pos + 2 : pos + 2 + width]
            if len(digits) != width or not all(d in _HEX_DIGITS for d in digits):
                raise self._error(f"invalid \\{esc} escape: expected {width} hexadecimal digits", pos)
            return self._append_code_point(int(digits, 16), pos, chunks, pos + 2 + width)

        sequence = "\\" + esc
        raise self._error(f"invalid escape sequence {sequence!r}", pos)

    def _append_code_point(self, code_point: int, pos: int, chunks: List[str], end: int) -> int:
        """Append the UTF-8 bytes of a code point.

        Args:
            code_point: Unicode code point.
            pos: Offset of the escape, for error reporting.
            chunks: Output buffer of latin-1 characters.
            end: Offset just past the escape.

        Returns:
            int: ``end``.

        Raises:
            MalformedLiteral: If the code point is beyond U+10FFFF.
        """
        if code_point > _MAX_CODE_POINT:
            raise self._error(f"unicode escape U+{code_point:X} is out of range", pos)
        chunks.append(chr(code_point).encode(TEXT_ENCODING, "surrogatepass").decode("latin-1"))
        return end


def _kind_name(value: Any) -> str:
    """Name the literal kind of a scalar value.

    Args:
        value: Parsed scalar.

    Returns:
        str: ``nil``, ``a boolean``, ``a number`` or ``a string``.
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, float):
        return "a number"
    return "a string"


def _latin1_view(data: Union[str, bytes, bytearray]) -> str:
    """Return a one-character-per-byte view of the payload.

    Args:
        data: Literal text as bytes, or as text to be encoded with UTF-8.

    Returns:
        str: latin-1 decoded bytes.
    """
    if isinstance(data, str):
        data = data.encode(TEXT_ENCODING, TEXT_ERRORS)
    return bytes(data).decode("latin-1")


def loads(data: Union[str, bytes, bytearray], *, max_depth: Optional[int] = None) -> Dict[Key, Value]:
    """Decode jkr literal text into a table.

    Args:
        data: Literal text, as ``str`` or raw ``bytes``.
        max_depth: Deepest nesting accepted; defaults to ``Settings.max_depth``.

    Returns:
        dict: The root table. String keys and values are ``str``, numbers are ``float``.

    Raises:
        NotATable: If the top-level expression is a literal but not a table.
        MalformedLiteral: If the text violates the grammar or nests too deeply.

    Examples:
        >>> loads("return {}")
        {}
        >>> loads('return {["a"]=1,["a"]=2,}')
        {'a': 2.0}
        >>> loads('return {["x"]="\\\\x41\\\\66\\\\u{43}",}')
        {'x': 'ABC'}
        >>> loads("@")
        Traceback (most recent call last):
            ...
        jkr.errors.MalformedLiteral: expected a table literal, found '@' (line 1, column 1, offset 0)
    """
    if max_depth is None:
        max_depth = settings.max_depth
    parser = _Parser(_latin1_view(data), max_depth)
    try:
        table = parser.parse_document()
    except RecursionError as e:
        raise parser._error("table nesting exceeds the interpreter stack") from e  # pylint: disable=protected-access
    logger.debug(f"Decoded table literal: {len(parser.text)} bytes, {len(table)} top-level entries")
    return table


def decode_literal(data: Union[bytes, bytearray], *, max_depth: Optional[int] = None) -> Dict[Key, Value]:
    """Decode jkr literal bytes into a table.

    Args:
        data: Decompressed payload.
        max_depth: Deepest nesting accepted; defaults to ``Settings.max_depth``.

    Returns:
        dict: The root table.
    """
    return loads(data, max_depth=max_depth)
