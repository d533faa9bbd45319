"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
jsonrequest, a product of Garudex Labs

Transports.
"""

from jsonrequest.transports.base import BaseTransport, OutboundRequest, TransportResponse
from jsonrequest.transports.http import HttpxTransport
from jsonrequest.transports.mock import MockTransport

# Shared default with default settings; its only state is one pooled client per event loop.
DEFAULT_TRANSPORT = HttpxTransport()

__all__ = [
    "BaseTransport",
    "OutboundRequest",
    "TransportResponse",
    "HttpxTransport",
    "MockTransport",
    "DEFAULT_TRANSPORT",
]
