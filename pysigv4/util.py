from __future__ import annotations

import datetime as dt
import hashlib
import hmac
from dataclasses import dataclass
from typing import Callable, Protocol, Union

from .constants import AMZ_DATE_FORMAT, DATE_FORMAT

Clock = Callable[[], dt.datetime]
BytesLike = Union[bytes, bytearray, str]


def to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(frozen=True)
class Timestamp:
    """Both SigV4 renderings of one captured instant."""

    date: str
    date_time: str

    @classmethod
    def from_datetime(cls, instant: dt.datetime) -> "Timestamp":
        # Naive datetimes are taken to already be UTC.
        if instant.tzinfo is not None:
            instant = instant.astimezone(dt.timezone.utc)
        return cls(date=instant.strftime(DATE_FORMAT), date_time=instant.strftime(AMZ_DATE_FORMAT))


def capture_timestamp(clock: Clock = utc_now) -> Timestamp:
    return Timestamp.from_datetime(clock())


class HashProvider(Protocol):
    def sha256_hex(self, data: bytes) -> str:
        ...

    def hmac_sha256(self, key: bytes, msg: bytes) -> bytes:
        ...


class HashlibProvider:
    """SHA-256 and HMAC-SHA256 backed by :mod:`hashlib` and :mod:`hmac`."""

    def sha256_hex(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()

    def hmac_sha256(self, key: bytes, msg: bytes) -> bytes:
        return hmac.new(key, msg, hashlib.sha256).digest()


DEFAULT_HASH_PROVIDER = HashlibProvider()
