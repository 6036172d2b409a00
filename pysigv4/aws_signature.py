"""
AWS Signature Version 4 building blocks.

Every function here is pure: values computed for one request (timestamp,
signed header list, derived key) are passed in and returned, never stored,
so a single signer can be shared across threads.

Paths and query strings are used verbatim. Callers must hand in values that
are already percent-encoded the way the remote service expects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .constants import ALGORITHM, KEY_PREFIX, SCOPE_TERMINATOR
from .util import DEFAULT_HASH_PROVIDER, BytesLike, HashProvider, Timestamp, to_bytes


@dataclass(frozen=True)
class CanonicalHeaders:
    block: str
    signed_headers: str
    names: Tuple[str, ...]


@dataclass(frozen=True)
class SignatureResult:
    timestamp: Timestamp
    credential_scope: str
    signed_headers: str
    canonical_request: str
    canonical_request_digest: str
    string_to_sign: str
    signature: str
    authorization: str


def join_fields(*fields: str) -> str:
    """Positional newline join used for the canonical request and the string to sign."""
    return "\n".join(fields)


def canonicalize_headers(headers: Mapping[str, str]) -> CanonicalHeaders:
    """
    Lowercase names, trim values and sort by name.

    Only leading/trailing whitespace is trimmed; runs of internal whitespace
    are left as they are. Names that differ only by case are not merged.
    """
    entries = sorted(
        ((name.lower(), str(value).strip()) for name, value in headers.items()),
        key=lambda item: item[0],
    )
    names = tuple(name for name, _ in entries)
    block = "".join(f"{name}:{value}\n" for name, value in entries)
    return CanonicalHeaders(block=block, signed_headers=";".join(names), names=names)


def payload_hash(body: BytesLike, hasher: HashProvider = DEFAULT_HASH_PROVIDER) -> str:
    return hasher.sha256_hex(to_bytes(body))


def build_canonical_request(
    method: str,
    path: str,
    query_string: str,
    headers: CanonicalHeaders,
    body: BytesLike,
    hasher: HashProvider = DEFAULT_HASH_PROVIDER,
) -> str:
    return join_fields(
        method,
        path,
        query_string,
        headers.block,
        headers.signed_headers,
        payload_hash(body, hasher),
    )


def hash_canonical_request(canonical_request: str, hasher: HashProvider = DEFAULT_HASH_PROVIDER) -> str:
    return hasher.sha256_hex(canonical_request.encode("utf-8"))


def credential_scope(date: str, region: str, service: str) -> str:
    return f"{date}/{region}/{service}/{SCOPE_TERMINATOR}"


def derive_signing_key_chain(
    secret_access_key: str,
    date: str,
    region: str,
    service: str,
    hasher: HashProvider = DEFAULT_HASH_PROVIDER,
) -> Tuple[bytes, bytes, bytes, bytes]:
    """Return the date, region, service and signing keys, in that order."""

    def _sign(key: bytes, msg: str) -> bytes:
        return hasher.hmac_sha256(key, msg.encode("utf-8"))

    k_date = _sign((KEY_PREFIX + secret_access_key).encode("utf-8"), date)
    k_region = _sign(k_date, region)
    k_service = _sign(k_region, service)
    k_signing = _sign(k_service, SCOPE_TERMINATOR)
    return k_date, k_region, k_service, k_signing


def derive_signing_key(
    secret_access_key: str,
    date: str,
    region: str,
    service: str,
    hasher: HashProvider = DEFAULT_HASH_PROVIDER,
) -> bytes:
    return derive_signing_key_chain(secret_access_key, date, region, service, hasher)[-1]


def build_string_to_sign(date_time: str, scope: str, canonical_request_digest: str) -> str:
    return join_fields(ALGORITHM, date_time, scope, canonical_request_digest)


def compute_signature(
    signing_key: bytes,
    string_to_sign: str,
    hasher: HashProvider = DEFAULT_HASH_PROVIDER,
) -> str:
    return hasher.hmac_sha256(signing_key, string_to_sign.encode("utf-8")).hex()


def build_authorization_header(access_key_id: str, scope: str, signed_headers: str, signature: str) -> str:
    return (
        f"{ALGORITHM} Credential={access_key_id}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


def create_signature(
    method: str,
    path: str,
    query_string: str,
    headers: Mapping[str, str],
    body: BytesLike,
    *,
    access_key_id: str,
    secret_access_key: str,
    region: str,
    service: str,
    timestamp: Timestamp,
    hasher: Optional[HashProvider] = None,
) -> SignatureResult:
    """
    Sign a request whose header set is already final.

    ``headers`` must not contain ``X-Amz-Date``; the date travels outside the
    signed header set and is added by the caller after signing.
    """
    hasher = hasher or DEFAULT_HASH_PROVIDER
    canonical = canonicalize_headers(headers)
    canonical_request = build_canonical_request(method, path, query_string, canonical, body, hasher)
    digest = hash_canonical_request(canonical_request, hasher)

    scope = credential_scope(timestamp.date, region, service)
    signing_key = derive_signing_key(secret_access_key, timestamp.date, region, service, hasher)
    string_to_sign = build_string_to_sign(timestamp.date_time, scope, digest)
    signature = compute_signature(signing_key, string_to_sign, hasher)

    return SignatureResult(
        timestamp=timestamp,
        credential_scope=scope,
        signed_headers=canonical.signed_headers,
        canonical_request=canonical_request,
        canonical_request_digest=digest,
        string_to_sign=string_to_sign,
        signature=signature,
        authorization=build_authorization_header(access_key_id, scope, canonical.signed_headers, signature),
    )
