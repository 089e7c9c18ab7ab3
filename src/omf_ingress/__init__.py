"""
omf-ingress — OMF ingress SDK for Python.

Sends OSIsoft Message Format types, containers and values to a cloud
ingress endpoint, authenticating with OAuth2 client credentials.
"""

from omf_ingress.client import IngressClient, AsyncIngressClient
from omf_ingress.auth import TokenProvider, BearerAuth
from omf_ingress.settings import IngressSettings, load_settings
from omf_ingress.errors import (
    OmfIngressError,
    AuthError,
    UnsupportedCompressionError,
    IngestionError,
    TransportError,
    CancellationError,
)
from omf_ingress.models.message import (
    ContainerInfo,
    StreamValues,
    MessageType,
    MessageFormat,
    MessageCompression,
    MessageAction,
    MessageHeaders,
)
from omf_ingress.transport.message import OmfMessage, build_message

__version__ = "0.1.0"
__all__ = [
    "IngressClient",
    "AsyncIngressClient",
    "TokenProvider",
    "BearerAuth",
    "IngressSettings",
    "load_settings",
    "OmfIngressError",
    "AuthError",
    "UnsupportedCompressionError",
    "IngestionError",
    "TransportError",
    "CancellationError",
    "ContainerInfo",
    "StreamValues",
    "MessageType",
    "MessageFormat",
    "MessageCompression",
    "MessageAction",
    "MessageHeaders",
    "OmfMessage",
    "build_message",
]
