"""
Core module for horizon_client.

Transport, error taxonomy and shared models. Query building, decoding,
pagination, streaming and submission are built on top of it.
"""

from .exceptions import (
    DecodeError,
    ErrorKind,
    HorizonError,
    HttpStatusError,
    MalformedResponseError,
    NoSuchPageError,
    TransportError,
    UnknownVariantError,
    handle_exception,
)
from .models import Link, Order, PageLinks
from .transport import AiohttpTransport, Transport

__all__ = [
    "AiohttpTransport",
    "DecodeError",
    "ErrorKind",
    "HorizonError",
    "HttpStatusError",
    "Link",
    "MalformedResponseError",
    "NoSuchPageError",
    "Order",
    "PageLinks",
    "Transport",
    "TransportError",
    "UnknownVariantError",
    "handle_exception",
]
