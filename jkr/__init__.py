# -*- coding: utf-8 -*-
"""jkr codec.

Reads and writes Balatro save files (``.jkr``): a Lua table literal,
``return {...}``, compressed as raw DEFLATE at level 1.

Examples:
    >>> import jkr
    >>> data = jkr.encode({"foo": "bar"})
    >>> jkr.decode(data)
    {'foo': 'bar'}

SPDX-License-Identifier: Apache-2.0
"""

__version__ = "0.1.0"

from jkr.decoder import loads
from jkr.encoder import dumps
from jkr.errors import (
    CyclicReference,
    DecodeError,
    EncodeError,
    FramingError,
    InvalidKeyType,
    JkrError,
    MalformedLiteral,
    NestingTooDeep,
    NotATable,
    UnsupportedValueType,
)
from jkr.framing import compress, decode, decode_from_stream, decompress, encode, encode_to_stream, Reader, Writer
from jkr.values import is_placeholder, structurally_equal

__all__ = [
    "__version__",
    "compress",
    "CyclicReference",
    "decode",
    "decode_from_stream",
    "DecodeError",
    "decompress",
    "dumps",
    "encode",
    "encode_to_stream",
    "EncodeError",
    "FramingError",
    "InvalidKeyType",
    "is_placeholder",
    "JkrError",
    "loads",
    "MalformedLiteral",
    "NestingTooDeep",
    "NotATable",
    "Reader",
    "structurally_equal",
    "UnsupportedValueType",
    "Writer",
]
