"""
Pure Python AWS Signature Version 4 request signing.

A :class:`RequestSigner` is bound to one service and region. It signs each
request with a freshly captured timestamp and hands the result to a
``requests`` based transport that reports back through a callback.
"""

from .errors import ServiceError, SigV4Error
from .service import Credentials, RequestSigner, ServiceContext, SignedRequest
from .transport import PreparedRequest, RequestsTransport, Response

__version__ = "0.1.0"
__all__ = [
    "Credentials",
    "PreparedRequest",
    "RequestSigner",
    "RequestsTransport",
    "Response",
    "ServiceContext",
    "ServiceError",
    "SigV4Error",
    "SignedRequest",
]
