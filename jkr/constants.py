# -*- coding: utf-8 -*-
"""Location: ./jkr/constants.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Format constants.
This module stores the fixed values of the jkr save format used throughout the codec.
"""

# Standard
import zlib

# Literal text.
RETURN_KEYWORD = "return"
NIL_KEYWORD = "nil"
PLACEHOLDER_TEXT = "MANUAL_REPLACE"
PLACEHOLDER_MARKER_KEY = "is"

# Framing. The game writes raw DEFLATE at the fastest level; other
# producers must match it byte-for-byte.
COMPRESSION_LEVEL = 1
WINDOW_BITS = -zlib.MAX_WBITS

# Integral floats below this magnitude are written without a fraction.
INTEGER_FORMAT_LIMIT = 2**63

# Upper bound for the configurable nesting depth; each table level costs two
# interpreter frames on encode and decode.
MAX_NESTING_LIMIT = 400
