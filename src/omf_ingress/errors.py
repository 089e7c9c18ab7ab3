"""
OMF ingress error types.
"""

from typing import Any, Optional


class OmfIngressError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthError(OmfIngressError):
    def __init__(self, message: str, code: str = "auth_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class UnsupportedCompressionError(OmfIngressError):
    def __init__(self, compression: Any):
        name = getattr(compression, "value", compression)
        super().__init__(
            "unsupported_compression",
            f"{name} compression is not supported. Only GZip is implemented.",
            {"compression": str(name)},
        )
        self.compression = compression


class IngestionError(OmfIngressError):
    """Non-2xx response from the OMF endpoint."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            "ingestion_error",
            f"HTTP {status_code}: {body[:200]}",
            {"status_code": status_code, "body": body},
        )
        self.status_code = status_code
        self.body = body


class TransportError(OmfIngressError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)


class CancellationError(OmfIngressError):
    def __init__(self, message: str = "Request cancelled by caller"):
        super().__init__("cancelled", message)
