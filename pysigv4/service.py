from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .aws_signature import SignatureResult, create_signature
from .constants import (
    DEFAULT_CONTENT_TYPE,
    HEADER_AMZ_DATE,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_HOST,
    HEADER_SECURITY_TOKEN,
    PROVIDER_DOMAIN,
    RESERVED_HEADERS,
)
from .logging import get_logger
from .transport import OnComplete, PreparedRequest, RequestsTransport, Response
from .util import DEFAULT_HASH_PROVIDER, BytesLike, Clock, HashProvider, capture_timestamp, to_bytes, utc_now

logger = get_logger()


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class ServiceContext:
    service: str
    region: str
    endpoint_url: str
    endpoint_host: str

    @classmethod
    def for_service(cls, service: str, region: str, domain: str = PROVIDER_DOMAIN) -> "ServiceContext":
        host = f"{service}.{region}.{domain}"
        return cls(service=service, region=region, endpoint_url=f"https://{host}/", endpoint_host=host)


@dataclass(frozen=True)
class SignedRequest:
    request: PreparedRequest
    signature: SignatureResult

    @property
    def headers(self) -> Dict[str, str]:
        return self.request.headers


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


class RequestSigner:
    """
    Signs requests for one service/region pair and hands them to a transport.

    The instance only holds immutable configuration. Timestamps, signed
    header lists and derived keys are computed per call, so one signer may
    be used from several threads at once.

    ``Host`` and ``Content-Type`` are filled in only when the caller did not
    supply them (names compared case-insensitively).
    """

    def __init__(
        self,
        service: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        *,
        session_token: Optional[str] = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
        transport: Optional[RequestsTransport] = None,
        clock: Clock = utc_now,
        hasher: Optional[HashProvider] = None,
        domain: str = PROVIDER_DOMAIN,
    ) -> None:
        self._credentials = Credentials(access_key_id, secret_access_key, session_token)
        self._context = ServiceContext.for_service(service, region, domain)
        self._content_type = content_type
        self._clock = clock
        self._hasher = hasher or DEFAULT_HASH_PROVIDER
        self._owns_transport = transport is None
        self._transport = transport or RequestsTransport()

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #
    @property
    def context(self) -> ServiceContext:
        return self._context

    @property
    def service(self) -> str:
        return self._context.service

    @property
    def region(self) -> str:
        return self._context.region

    @property
    def endpoint_url(self) -> str:
        return self._context.endpoint_url

    @property
    def endpoint_host(self) -> str:
        return self._context.endpoint_host

    @property
    def access_key_id(self) -> str:
        return self._credentials.access_key_id

    @property
    def content_type(self) -> str:
        return self._content_type

    @property
    def transport(self) -> RequestsTransport:
        return self._transport

    def build_url(self, path: str, query_string: str = "") -> str:
        endpoint = self._context.endpoint_url
        if path.startswith("/"):
            endpoint = endpoint.rstrip("/")
        url = endpoint + path
        if query_string:
            url += "?" + query_string
        return url

    # ------------------------------------------------------------------ #
    # Signing
    # ------------------------------------------------------------------ #
    def sign(
        self,
        method: str,
        path: str,
        query_string: str = "",
        headers: Optional[Mapping[str, str]] = None,
        body: BytesLike = b"",
    ) -> SignedRequest:
        timestamp = capture_timestamp(self._clock)
        payload = to_bytes(body)

        request_headers = {
            name: value for name, value in (headers or {}).items() if name.lower() not in RESERVED_HEADERS
        }
        if not _has_header(request_headers, HEADER_HOST):
            request_headers[HEADER_HOST] = self._context.endpoint_host
        if not _has_header(request_headers, HEADER_CONTENT_TYPE):
            request_headers[HEADER_CONTENT_TYPE] = self._content_type
        if self._credentials.session_token and not _has_header(request_headers, HEADER_SECURITY_TOKEN):
            request_headers[HEADER_SECURITY_TOKEN] = self._credentials.session_token

        result = create_signature(
            method,
            path,
            query_string,
            request_headers,
            payload,
            access_key_id=self._credentials.access_key_id,
            secret_access_key=self._credentials.secret_access_key,
            region=self._context.region,
            service=self._context.service,
            timestamp=timestamp,
            hasher=self._hasher,
        )
        logger.debug(
            "Signed %s %s scope=%s signed_headers=%s",
            method,
            path,
            result.credential_scope,
            result.signed_headers,
        )

        request_headers[HEADER_AUTHORIZATION] = result.authorization
        # Added after signing: the date is not part of the signed header set.
        request_headers[HEADER_AMZ_DATE] = timestamp.date_time

        prepared = PreparedRequest(
            method=method,
            url=self.build_url(path, query_string),
            headers=request_headers,
            body=payload,
        )
        return SignedRequest(request=prepared, signature=result)

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #
    def sign_and_send(
        self,
        method: str,
        path: str,
        query_string: str = "",
        headers: Optional[Mapping[str, str]] = None,
        body: BytesLike = b"",
        on_complete: Optional[OnComplete] = None,
    ) -> "Future[Response]":
        signed = self.sign(method, path, query_string, headers, body)
        return self.transport.send(signed.request, on_complete)

    def post(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: BytesLike = b"",
        on_complete: Optional[OnComplete] = None,
    ) -> "Future[Response]":
        return self.sign_and_send("POST", path, "", headers, body, on_complete)

    def get(
        self,
        path: str,
        query_string: str = "",
        headers: Optional[Mapping[str, str]] = None,
        on_complete: Optional[OnComplete] = None,
    ) -> "Future[Response]":
        return self.sign_and_send("GET", path, query_string, headers, b"", on_complete)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "RequestSigner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
