"""Tests for the time source and hash provider helpers."""

import datetime as dt

from freezegun import freeze_time

from pysigv4.util import HashlibProvider, Timestamp, capture_timestamp, to_bytes, utc_now

import vectors


class TestTimestamp:
    """Tests for Timestamp and capture_timestamp."""

    def test_from_aware_datetime(self) -> None:
        """Both renderings come from the same instant."""
        stamp = Timestamp.from_datetime(vectors.FROZEN_INSTANT)
        assert stamp.date == vectors.DATE
        assert stamp.date_time == vectors.DATE_TIME

    def test_non_utc_offset_converted(self) -> None:
        """Offsets are normalised to UTC, which can move the date."""
        tz = dt.timezone(dt.timedelta(hours=-5))
        stamp = Timestamp.from_datetime(dt.datetime(2015, 8, 30, 22, 0, 0, tzinfo=tz))
        assert stamp.date == "20150831"
        assert stamp.date_time == "20150831T030000Z"

    def test_naive_datetime_taken_as_utc(self) -> None:
        """Naive datetimes are rendered as-is."""
        stamp = Timestamp.from_datetime(dt.datetime(2015, 8, 30, 12, 36, 0))
        assert stamp.date_time == vectors.DATE_TIME

    def test_capture_uses_clock(self) -> None:
        """capture_timestamp reads the injected clock."""
        assert capture_timestamp(vectors.frozen_clock).date_time == vectors.DATE_TIME

    @freeze_time("2015-08-30 12:36:00")
    def test_default_clock_is_utc(self) -> None:
        """The default clock returns an aware UTC datetime."""
        now = utc_now()
        assert now.tzinfo is not None
        assert capture_timestamp().date_time == vectors.DATE_TIME


class TestHashlibProvider:
    """Tests for HashlibProvider."""

    def test_sha256_of_empty(self) -> None:
        """Digest of zero bytes is the well-known constant."""
        assert HashlibProvider().sha256_hex(b"") == vectors.EMPTY_HASH

    def test_hmac_returns_raw_bytes(self) -> None:
        """HMAC output is a 32-byte digest."""
        digest = HashlibProvider().hmac_sha256(b"key", b"msg")
        assert isinstance(digest, bytes)
        assert len(digest) == 32

    def test_to_bytes(self) -> None:
        """Strings are UTF-8 encoded, bytes-likes copied."""
        assert to_bytes("é") == "é".encode("utf-8")
        assert to_bytes(bytearray(b"ab")) == b"ab"
