# -*- coding: utf-8 -*-
"""End-to-end tests of the public jkr API."""

import io

import pytest

import jkr


def _noop():
    return None


SAVE_LIKE = {
    "GAME": {
        "round": 3,
        "dollars": 12.5,
        "seeded": False,
        "pseudorandom": {"seed": "7LB2WVPK", "hashed_seed": 0.1234567890123},
        "jokers": {1: {"key": "j_joker", "edition": {"foil": True}}, 2: {"key": "j_blueprint"}},
    },
    "BLIND": {"chips": 1e300, "tiny": 5e-324, "negative": -42},
    "STATE": 1,
    "notes": 'quote " backslash \\ newline \n tab \t bell \a nul \x00',
    "unicode": "Jöker ☃ \U0001F0CF",
    "raw": b"\xff\xfe\x00\x80",
    "empty": {},
    -1: "negative key",
    0.25: "fractional key",
}


class TestRoundTrip:
    """decode(encode(t)) equals t."""

    @pytest.mark.parametrize(
        "table",
        [
            {},
            {"foo": "bar"},
            {1: 42},
            {"foo": True, "bar": False},
            {"nested": {"a": 1, "b": 2}},
            {"": ""},
            {"deep": {"er": {"est": {1: {2: {3: "x"}}}}}},
            SAVE_LIKE,
        ],
    )
    def test_round_trip(self, table):
        """Tables survive encode then decode."""
        assert jkr.structurally_equal(jkr.decode(jkr.encode(table)), table)

    def test_stream_round_trip(self):
        """The stream entry points round-trip too."""
        buffer = io.BytesIO()
        jkr.encode_to_stream(SAVE_LIKE, buffer)
        buffer.seek(0)
        assert jkr.structurally_equal(jkr.decode_from_stream(buffer), SAVE_LIKE)

    def test_text_round_trip(self):
        """The literal layer round-trips on its own."""
        assert jkr.structurally_equal(jkr.loads(jkr.dumps(SAVE_LIKE)), SAVE_LIKE)

    def test_raw_bytes_preserved(self):
        """Bytes that are not UTF-8 come back unchanged."""
        decoded = jkr.decode(jkr.encode({"raw": b"\xff\xfe\x00\x80"}))
        assert decoded["raw"].encode("utf-8", "surrogateescape") == b"\xff\xfe\x00\x80"

    def test_reencode_is_stable(self):
        """Decoded tables encode back to the same text."""
        text = jkr.dumps({"a": {"b": 1}, "c": "d"})
        assert jkr.dumps(jkr.loads(text)) == text

    def test_placeholder(self):
        """Object tables become the placeholder string and stay that way."""
        table = {"card": {"is": _noop, "ability": {"mult": 4}}, "plain": {"x": 1}}
        decoded = jkr.decode(jkr.encode(table))
        assert decoded == {"card": "MANUAL_REPLACE", "plain": {"x": 1}}

    def test_decode_is_idempotent(self):
        """The same bytes decode to equal tables every time."""
        data = jkr.encode(SAVE_LIKE)
        assert jkr.structurally_equal(jkr.decode(data), jkr.decode(data))


class TestPublicErrors:
    """The error taxonomy is exported from the package."""

    def test_cycle(self):
        """Cycles fail."""
        tbl = {}
        tbl["self"] = tbl
        with pytest.raises(jkr.CyclicReference):
            jkr.encode(tbl)

    def test_invalid_key(self):
        """Boolean keys fail."""
        with pytest.raises(jkr.InvalidKeyType):
            jkr.encode({True: "invalid"})

    def test_unsupported_value(self):
        """Callables as values fail."""
        with pytest.raises(jkr.UnsupportedValueType):
            jkr.encode({"foo": _noop})

    def test_not_a_table(self):
        """A non-table payload fails."""
        with pytest.raises(jkr.NotATable):
            jkr.decode(jkr.compress('return "foo"'))

    def test_malformed(self):
        """An invalid payload fails."""
        with pytest.raises(jkr.MalformedLiteral):
            jkr.decode(jkr.compress("not a valid lua"))

    def test_framing(self):
        """A corrupt stream fails."""
        with pytest.raises(jkr.FramingError):
            jkr.decode(b"\xff")

    def test_all_share_a_base(self):
        """Every codec error is a JkrError."""
        for cls in (
            jkr.CyclicReference,
            jkr.InvalidKeyType,
            jkr.UnsupportedValueType,
            jkr.NestingTooDeep,
            jkr.MalformedLiteral,
            jkr.NotATable,
            jkr.FramingError,
        ):
            assert issubclass(cls, jkr.JkrError)

    def test_version(self):
        """The package exposes its version."""
        assert jkr.__version__
