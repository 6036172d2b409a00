from __future__ import annotations

import json
from typing import Mapping, Optional


class SigV4Error(Exception):
    """Base error thrown by the signing client."""


class ServiceError(SigV4Error):
    """
    A request the remote service rejected or never answered.

    ``status_code`` is 0 for transport failures. ``error_type`` and
    ``request_id`` are taken from the AWS error response when present, e.g.
    ``SignatureDoesNotMatch`` or ``InvalidSignatureException``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        error_type: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type
        self.request_id = request_id

    @classmethod
    def from_http(cls, status_code: int, body: str, headers: Mapping[str, str]) -> "ServiceError":
        lowered = {name.lower(): value for name, value in headers.items()}
        error_type = lowered.get("x-amzn-errortype")
        message = body[:200]
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error_type = error_type or payload.get("__type") or payload.get("code")
            message = payload.get("message") or payload.get("Message") or message
        if error_type:
            # JSON protocols may send "namespace#Code" or "Code:http://..."
            error_type = error_type.split(":", 1)[0].rsplit("#", 1)[-1]
        return cls(
            f"HTTP {status_code} {error_type or 'error'}: {message}",
            status_code=status_code,
            error_type=error_type,
            request_id=lowered.get("x-amzn-requestid") or lowered.get("x-amz-request-id"),
        )
