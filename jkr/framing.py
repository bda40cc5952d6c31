# -*- coding: utf-8 -*-
"""Location: ./jkr/framing.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

jkr file framing.

A jkr file is a single raw DEFLATE stream (no zlib or gzip header) whose
payload is the table literal produced by :mod:`jkr.encoder`. Files are always
written at compression level 1, the setting the game itself uses. Any level
is accepted on read.

Buffer and stream entry points share the same core::

    encode(table) -> bytes            encode_to_stream(table, stream)
    decode(data) -> dict              decode_from_stream(stream) -> dict

Decompressing untrusted input can expand it enormously. Pass ``max_size``
(or set ``JKR_MAX_DECOMPRESSED_BYTES``) to bound the payload.

Examples:
    >>> from jkr.framing import decode, encode
    >>> data = encode({"round": 3, "won": False})
    >>> decode(data) == {"round": 3.0, "won": False}
    True
    >>> decode(b"not deflate at all")
    Traceback (most recent call last):
        ...
    jkr.errors.FramingError: compressed stream is corrupt: invalid block type
"""

# Standard
import io
from typing import Any, BinaryIO, Dict, Optional, Union
import zlib

# First-Party
from jkr.config import settings
from jkr.constants import COMPRESSION_LEVEL, WINDOW_BITS
from jkr.decoder import decode_literal
from jkr.encoder import encode_literal
from jkr.errors import FramingError
from jkr.logging_service import get_logger
from jkr.values import Key, Table, Value

logger = get_logger(__name__)


# =============================================================================
# Compression core
# =============================================================================


def _write_compressed(payload: bytes, stream: BinaryIO) -> None:
    """Deflate a payload at the format's fixed level and write it out.

    The stream is sync-flushed and then finished, so it ends with a final block.

    Args:
        payload: Literal bytes.
        stream: Writable binary stream.

    Raises:
        FramingError: If the compressor fails.
    """
    compressor = zlib.compressobj(COMPRESSION_LEVEL, zlib.DEFLATED, WINDOW_BITS)
    try:
        stream.write(compressor.compress(payload))
        stream.write(compressor.flush(zlib.Z_SYNC_FLUSH))
        stream.write(compressor.flush(zlib.Z_FINISH))
    except zlib.error as e:
        raise FramingError(f"failed to compress payload: {e}") from e


def _inflate_into(decompressor: Any, chunk: bytes, out: bytearray, max_size: Optional[int]) -> None:
    """Feed one chunk of compressed input, honouring the size bound.

    Args:
        decompressor: ``zlib`` decompression object.
        chunk: Compressed bytes.
        out: Buffer receiving decompressed bytes.
        max_size: Largest allowed payload, or None for no bound.

    Raises:
        FramingError: If the payload grows past ``max_size``.
    """
    while chunk:
        limit = 0 if max_size is None else max_size - len(out) + 1
        out += decompressor.decompress(chunk, limit)
        if max_size is not None and len(out) > max_size:
            raise FramingError(f"decompressed payload exceeds {max_size} bytes")
        chunk = decompressor.unconsumed_tail


def _read_decompressed(stream: BinaryIO, max_size: Optional[int], chunk_size: int) -> bytes:
    """Read and inflate a raw DEFLATE stream to its end.

    Reaching the final block is success; running out of input before it is not.

    Args:
        stream: Readable binary stream.
        max_size: Largest allowed payload, or None for no bound.
        chunk_size: Bytes requested per read.

    Returns:
        bytes: The decompressed payload.

    Raises:
        FramingError: If the stream is corrupt, truncated or too large.
    """
    decompressor = zlib.decompressobj(WINDOW_BITS)
    out = bytearray()
    try:
        while not decompressor.eof:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            _inflate_into(decompressor, chunk, out, max_size)
        out += decompressor.flush()
    except zlib.error as e:
        message = str(e).split(": ", 1)[-1]
        raise FramingError(f"compressed stream is corrupt: {message}") from e

    if max_size is not None and len(out) > max_size:
        raise FramingError(f"decompressed payload exceeds {max_size} bytes")
    if not decompressor.eof:
        raise FramingError("compressed stream is truncated")
    if decompressor.unused_data:
        logger.debug(f"Ignoring {len(decompressor.unused_data)} bytes after the end of the compressed stream")
    return bytes(out)


def _resolve_max_size(max_size: Optional[int]) -> Optional[int]:
    """Fall back to the configured decompression bound.

    Args:
        max_size: Explicit bound, or None.

    Returns:
        The explicit bound, else ``Settings.max_decompressed_bytes``.
    """
    return max_size if max_size is not None else settings.max_decompressed_bytes


def compress(text: Union[str, bytes]) -> bytes:
    """Deflate literal text the way jkr files are written.

    Args:
        text: Literal text; ``str`` is encoded as UTF-8.

    Returns:
        bytes: Raw DEFLATE stream at level 1.

    Examples:
        >>> decompress(compress("return {}"))
        b'return {}'
    """
    if isinstance(text, str):
        text = text.encode("utf-8")
    buffer = io.BytesIO()
    _write_compressed(text, buffer)
    return buffer.getvalue()


def decompress(data: Union[bytes, bytearray], *, max_size: Optional[int] = None) -> bytes:
    """Inflate a raw DEFLATE stream of any compression level.

    Args:
        data: Compressed bytes.
        max_size: Largest allowed payload; defaults to ``Settings.max_decompressed_bytes``.

    Returns:
        bytes: The payload.

    Raises:
        FramingError: If the stream is corrupt, truncated or too large.

    Examples:
        >>> decompress(compress("return {}")[:-3])
        Traceback (most recent call last):
            ...
        jkr.errors.FramingError: compressed stream is truncated
    """
    return _read_decompressed(io.BytesIO(data), _resolve_max_size(max_size), settings.read_chunk_size)


# =============================================================================
# Table entry points
# =============================================================================


def encode_to_stream(table: Table, stream: BinaryIO) -> None:
    """Encode a table and write it to a stream as a jkr file.

    Nothing is written if the table cannot be encoded.

    Args:
        table: Root table.
        stream: Writable binary stream.

    Raises:
        EncodeError: If the table cannot be encoded (see :func:`jkr.encoder.dumps`).
        FramingError: If compression fails.
    """
    payload = encode_literal(table)
    _write_compressed(payload, stream)
    logger.debug(f"Wrote jkr payload of {len(payload)} bytes")


def encode(table: Table) -> bytes:
    """Encode a table as the bytes of a jkr file.

    Args:
        table: Root table.

    Returns:
        bytes: Compressed file contents.

    Examples:
        >>> decompress(encode({"foo": "bar"}))
        b'return {["foo"]="bar",}'
    """
    buffer = io.BytesIO()
    encode_to_stream(table, buffer)
    return buffer.getvalue()


def decode_from_stream(stream: BinaryIO, *, max_size: Optional[int] = None) -> Dict[Key, Value]:
    """Read a jkr file from a stream and decode its table.

    Args:
        stream: Readable binary stream positioned at the start of the file.
        max_size: Largest allowed decompressed payload; defaults to ``Settings.max_decompressed_bytes``.

    Returns:
        dict: The root table.

    Raises:
        FramingError: If the compressed stream is corrupt, truncated or too large.
        DecodeError: If the payload is not a valid table literal.
    """
    payload = _read_decompressed(stream, _resolve_max_size(max_size), settings.read_chunk_size)
    logger.debug(f"Read jkr payload of {len(payload)} bytes")
    return decode_literal(payload)


def decode(data: Union[bytes, bytearray], *, max_size: Optional[int] = None) -> Dict[Key, Value]:
    """Decode the bytes of a jkr file.

    Args:
        data: Compressed file contents.
        max_size: Largest allowed decompressed payload; defaults to ``Settings.max_decompressed_bytes``.

    Returns:
        dict: The root table.
    """
    return decode_from_stream(io.BytesIO(data), max_size=max_size)


# =============================================================================
# Stream wrappers
# =============================================================================


class Reader:
    """Reads the table from a jkr file.

    Examples:
        >>> import io
        >>> Reader(io.BytesIO(encode({"ante": 1}))).read()
        {'ante': 1.0}
    """

    def __init__(self, stream: BinaryIO, *, max_size: Optional[int] = None):
        """Initialize the reader.

        Args:
            stream: Readable binary stream.
            max_size: Largest allowed decompressed payload.
        """
        self._stream = stream
        self._max_size = max_size

    def read(self) -> Dict[Key, Value]:
        """Read the stream to the end of the compressed data and decode it.

        Returns:
            dict: The root table.
        """
        return decode_from_stream(self._stream, max_size=self._max_size)


class Writer:
    """Writes a table as a jkr file that the game can load.

    Examples:
        >>> import io
        >>> buffer = io.BytesIO()
        >>> Writer(buffer).write({"ante": 1})
        >>> decompress(buffer.getvalue())
        b'return {["ante"]=1,}'
    """

    def __init__(self, stream: BinaryIO):
        """Initialize the writer.

        Args:
            stream: Writable binary stream.
        """
        self._stream = stream

    def write(self, table: Table) -> None:
        """Encode the table and write the finished compressed stream.

        Args:
            table: Root table.
        """
        encode_to_stream(table, self._stream)
