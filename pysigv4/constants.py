from __future__ import annotations

ALGORITHM = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR = "aws4_request"
KEY_PREFIX = "AWS4"

PROVIDER_DOMAIN = "amazonaws.com"
DEFAULT_CONTENT_TYPE = "application/x-amz-json-1.0"

AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
DATE_FORMAT = "%Y%m%d"

# SHA-256 of zero bytes
EMPTY_PAYLOAD_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

HEADER_HOST = "Host"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_AMZ_DATE = "X-Amz-Date"
HEADER_SECURITY_TOKEN = "X-Amz-Security-Token"
HEADER_AUTHORIZATION = "Authorization"

# Dropped from caller headers before canonicalization; the signer sets them itself.
RESERVED_HEADERS = frozenset({HEADER_AMZ_DATE.lower(), HEADER_AUTHORIZATION.lower()})

TRANSPORT_CONFIG = {
    "TIMEOUT": 45.0,
    "MAX_WORKERS": 4,
}
