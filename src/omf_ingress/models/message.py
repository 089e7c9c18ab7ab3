"""
OMF message models: headers, containers and stream values.
"""

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel

from omf_ingress.errors import UnsupportedCompressionError

CURRENT_OMF_VERSION = "1.0"

HEADER_MESSAGE_TYPE = "messagetype"
HEADER_MESSAGE_FORMAT = "messageformat"
HEADER_COMPRESSION = "compression"
HEADER_ACTION = "action"
HEADER_VERSION = "omfversion"


class MessageType(str, Enum):
    DATA = "Data"
    CONTAINER = "Container"
    TYPE = "Type"


class MessageFormat(str, Enum):
    JSON = "JSON"


class MessageCompression(str, Enum):
    NONE = "None"
    GZIP = "GZip"


class MessageAction(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


def _parse_enum(enum_cls: type[Enum], raw: str) -> Any:
    for member in enum_cls:
        if member.value.lower() == raw.strip().lower():
            return member
    raise ValueError(f"Invalid {enum_cls.__name__} header value: {raw!r}")


class MessageHeaders(BaseModel):
    """Typed OMF headers. Converted to strings only at the HTTP boundary."""

    message_type: MessageType
    message_format: MessageFormat = MessageFormat.JSON
    compression: MessageCompression = MessageCompression.NONE
    action: MessageAction = MessageAction.CREATE
    version: str = CURRENT_OMF_VERSION

    def to_wire(self) -> dict[str, str]:
        return {
            HEADER_MESSAGE_TYPE: self.message_type.value,
            HEADER_MESSAGE_FORMAT: self.message_format.value,
            HEADER_COMPRESSION: self.compression.value,
            HEADER_ACTION: self.action.value,
            HEADER_VERSION: self.version,
        }

    @classmethod
    def from_wire(cls, headers: Mapping[str, str]) -> "MessageHeaders":
        """Parse wire headers. Names and values are matched case-insensitively."""
        lowered = {k.lower(): v for k, v in headers.items()}
        if HEADER_MESSAGE_TYPE not in lowered:
            raise ValueError(f"Missing required header: {HEADER_MESSAGE_TYPE}")

        compression = MessageCompression.NONE
        if HEADER_COMPRESSION in lowered:
            try:
                compression = _parse_enum(MessageCompression, lowered[HEADER_COMPRESSION])
            except ValueError:
                raise UnsupportedCompressionError(lowered[HEADER_COMPRESSION])

        return cls(
            message_type=_parse_enum(MessageType, lowered[HEADER_MESSAGE_TYPE]),
            message_format=_parse_enum(MessageFormat, lowered.get(HEADER_MESSAGE_FORMAT, "JSON")),
            compression=compression,
            action=_parse_enum(MessageAction, lowered.get(HEADER_ACTION, "Create")),
            version=lowered.get(HEADER_VERSION, CURRENT_OMF_VERSION),
        )


class ContainerInfo(BaseModel):
    """Container declaration: binds a container id to a previously created type."""
    id: str
    type_id: str


class StreamValues(BaseModel):
    """Values for one stream (container)."""
    stream_id: str
    values: list[dict[str, Any]] = []
