"""
OMF message envelope: headers plus a raw body, with reversible gzip compression.
"""

import gzip
import json
from typing import Any, Mapping, Union

from omf_ingress.errors import UnsupportedCompressionError
from omf_ingress.models.message import (
    CURRENT_OMF_VERSION,
    MessageAction,
    MessageCompression,
    MessageHeaders,
    MessageType,
)


class OmfMessage:
    def __init__(
        self,
        message_type: MessageType,
        body: bytes = b"",
        action: MessageAction = MessageAction.CREATE,
        version: str = CURRENT_OMF_VERSION,
    ):
        self.headers = MessageHeaders(message_type=message_type, action=action, version=version)
        self.body = body

    @property
    def compression(self) -> MessageCompression:
        return self.headers.compression

    def set_body(self, body: bytes) -> None:
        self.body = body

    def compress(self, compression: Union[MessageCompression, str] = MessageCompression.GZIP) -> None:
        """Gzip the body. Body and header are left untouched on failure."""
        if not _is_gzip(compression):
            raise UnsupportedCompressionError(compression)
        if self.headers.compression is not MessageCompression.NONE:
            raise ValueError("message body is already compressed")

        compressed = gzip.compress(self.body)
        self.body = compressed
        self.headers = self.headers.model_copy(update={"compression": MessageCompression.GZIP})

    def decompress(self) -> None:
        """Undo compression according to the compression header; no-op for None."""
        if self.headers.compression is MessageCompression.NONE:
            return
        if self.headers.compression is not MessageCompression.GZIP:
            raise UnsupportedCompressionError(self.headers.compression)

        decompressed = gzip.decompress(self.body)
        self.body = decompressed
        self.headers = self.headers.model_copy(update={"compression": MessageCompression.NONE})

    def to_http_headers(self) -> dict[str, str]:
        headers = self.headers.to_wire()
        headers["Content-Type"] = "application/json"
        return headers

    @classmethod
    def from_http_headers(cls, headers: Mapping[str, str], body: bytes) -> "OmfMessage":
        parsed = MessageHeaders.from_wire(headers)
        msg = cls(parsed.message_type, body, action=parsed.action, version=parsed.version)
        msg.headers = parsed
        return msg

    def json(self) -> Any:
        """Decode the (uncompressed) body as JSON."""
        return json.loads(self.body.decode("utf-8"))

    def __repr__(self) -> str:
        return f"OmfMessage({self.headers.to_wire()!r}, {len(self.body)} bytes)"


def _is_gzip(compression: Union[MessageCompression, str]) -> bool:
    if isinstance(compression, MessageCompression):
        return compression is MessageCompression.GZIP
    return isinstance(compression, str) and compression.strip().lower() == "gzip"


def build_message(
    payload: Any,
    message_type: MessageType,
    action: MessageAction = MessageAction.CREATE,
    version: str = CURRENT_OMF_VERSION,
) -> OmfMessage:
    """Serialize a JSON payload (or pre-encoded bytes) into an uncompressed message."""
    if isinstance(payload, (bytes, bytearray)):
        body = bytes(payload)
    else:
        body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return OmfMessage(message_type, body, action=action, version=version)
