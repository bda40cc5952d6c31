# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
"""

# Standard
from typing import Callable
import zlib

# Third-Party
import pytest

# First-Party
from jkr.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides in one test never leak into another."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def deflate() -> Callable[..., bytes]:
    """Return a helper that raw-deflates text at a chosen level.

    Usage:
        data = deflate('return {["a"]=1,}', level=9)
    """

    def _deflate(text, level: int = 1) -> bytes:
        if isinstance(text, str):
            text = text.encode("utf-8")
        compressor = zlib.compressobj(level, zlib.DEFLATED, -zlib.MAX_WBITS)
        return compressor.compress(text) + compressor.flush()

    return _deflate


@pytest.fixture
def inflate() -> Callable[[bytes], str]:
    """Return a helper that raw-inflates bytes back to text."""

    def _inflate(data: bytes) -> str:
        return zlib.decompress(data, -zlib.MAX_WBITS).decode("utf-8")

    return _inflate
