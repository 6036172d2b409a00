from __future__ import annotations

import json as jsonlib
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

from .constants import TRANSPORT_CONFIG
from .errors import ServiceError
from .logging import get_logger, redact_headers

logger = get_logger()


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    headers: Dict[str, str]
    body: bytes = b""


@dataclass
class Response:
    """
    Outcome of one transport call.

    ``status_code`` is 0 when no HTTP response was received; ``error`` then
    holds the exception raised by the HTTP layer.
    """

    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status_code < 400

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return jsonlib.loads(self.body)

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise ServiceError(str(self.error), status_code=self.status_code) from self.error
        if self.status_code >= 400:
            raise ServiceError.from_http(self.status_code, self.text, self.headers)


OnComplete = Callable[[Response], None]


class RequestsTransport:
    """
    Sends prepared requests on a worker pool and reports back through a callback.

    Nothing is retried. Connection errors and timeouts are delivered as a
    :class:`Response` with ``status_code == 0``.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = TRANSPORT_CONFIG["TIMEOUT"] if timeout is None else timeout
        self._executor = ThreadPoolExecutor(
            max_workers=TRANSPORT_CONFIG["MAX_WORKERS"] if max_workers is None else max_workers,
            thread_name_prefix="sigv4-transport",
        )

    def send(self, request: PreparedRequest, on_complete: Optional[OnComplete] = None) -> "Future[Response]":
        return self._executor.submit(self._deliver, request, on_complete)

    def perform(self, request: PreparedRequest) -> Response:
        logger.info("Request %s %s", request.method, request.url)
        logger.debug("Request headers %s", redact_headers(request.headers))
        try:
            resp = self.session.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Request %s %s failed: %s", request.method, request.url, exc)
            return Response(status_code=0, body=str(exc).encode("utf-8"), error=exc)

        if resp.status_code >= 400:
            logger.warning("Request %s %s returned status=%s", request.method, request.url, resp.status_code)
        return Response(status_code=resp.status_code, body=resp.content, headers=dict(resp.headers))

    def _deliver(self, request: PreparedRequest, on_complete: Optional[OnComplete]) -> Response:
        response = self.perform(request)
        if on_complete is not None:
            try:
                on_complete(response)
            except Exception:
                logger.exception("on_complete callback failed for %s %s", request.method, request.url)
                raise
        return response

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
