"""
IngressClient and AsyncIngressClient: send OMF types, containers and values.
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import httpx

from omf_ingress.auth import BearerAuth, TokenProvider
from omf_ingress.errors import IngestionError
from omf_ingress.models.message import (
    ContainerInfo,
    MessageAction,
    MessageCompression,
    MessageType,
    StreamValues,
)
from omf_ingress.settings import IngressSettings
from omf_ingress.transport.http import HttpClient
from omf_ingress.transport.message import build_message

logger = logging.getLogger(__name__)

TypeSchema = Union[str, Mapping[str, Any]]


def _types_body(types: Iterable[TypeSchema]) -> bytes:
    # JSON-schema strings are spliced verbatim so callers control their exact text.
    parts = [t if isinstance(t, str) else json.dumps(t, separators=(",", ":")) for t in types]
    return f"[{','.join(parts)}]".encode("utf-8")


def _dump_all(items: Iterable[Any], model: Any) -> list[dict[str, Any]]:
    return [
        (item if isinstance(item, model) else model.model_validate(item)).model_dump(mode="json")
        for item in items
    ]


class AsyncIngressClient:
    """Async OMF ingress client (primary)."""

    def __init__(
        self,
        service_url: str,
        tenant_id: str,
        namespace_id: str,
        client_id: str,
        client_secret: str,
        use_compression: bool = False,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.use_compression = use_compression
        self.omf_path = f"api/tenants/{tenant_id}/namespaces/{namespace_id}/omf2"

        self.http = HttpClient(base_url=service_url, timeout=timeout, transport=transport)
        self.tokens = TokenProvider(self.http, client_id, client_secret, clock=clock)
        self.http.set_auth(BearerAuth(self.tokens))

    @classmethod
    def from_settings(cls, settings: IngressSettings, **kwargs: Any) -> "AsyncIngressClient":
        return cls(**{**settings.model_dump(), **kwargs})

    async def create_types(
        self, types: Iterable[TypeSchema], cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Send JSON-schema type definitions for the data that will follow."""
        await self.send_message(_types_body(types), MessageType.TYPE, cancel_event=cancel_event)

    async def create_containers(
        self,
        containers: Iterable[Union[ContainerInfo, Mapping[str, Any]]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Declare containers (streams), each bound to a type id."""
        await self.send_message(
            _dump_all(containers, ContainerInfo), MessageType.CONTAINER, cancel_event=cancel_event,
        )

    async def send_values(
        self,
        values: Iterable[Union[StreamValues, Mapping[str, Any]]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Send data values. Safe to run concurrently with other sends."""
        await self.send_message(
            _dump_all(values, StreamValues), MessageType.DATA, cancel_event=cancel_event,
        )

    async def send_message(
        self,
        payload: Any,
        message_type: MessageType,
        action: MessageAction = MessageAction.CREATE,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Send one OMF message. A single attempt; non-2xx raises IngestionError."""
        msg = build_message(payload, message_type, action=action)
        if self.use_compression:
            msg.compress(MessageCompression.GZIP)

        logger.debug(f"POST {self.omf_path} {msg!r}")
        resp = await self.http.post_content(
            self.omf_path, msg.body, msg.to_http_headers(), cancel_event=cancel_event,
        )
        text = resp.text
        if not resp.is_success:
            logger.warning(f"{message_type.value} message rejected: HTTP {resp.status_code}")
            raise IngestionError(resp.status_code, text)

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncIngressClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class IngressClient:
    """Sync wrapper around AsyncIngressClient. Runs the event loop internally."""

    def __init__(self, *args: Any, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._async = AsyncIngressClient(*args, **kwargs)

    @classmethod
    def from_settings(cls, settings: IngressSettings, **kwargs: Any) -> "IngressClient":
        return cls(**{**settings.model_dump(), **kwargs})

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def use_compression(self) -> bool:
        return self._async.use_compression

    @use_compression.setter
    def use_compression(self, value: bool) -> None:
        self._async.use_compression = value

    @property
    def tokens(self) -> TokenProvider:
        return self._async.tokens

    def create_types(self, types: Iterable[TypeSchema]) -> None:
        self._run(self._async.create_types(types))

    def create_containers(self, containers: Iterable[Union[ContainerInfo, Mapping[str, Any]]]) -> None:
        self._run(self._async.create_containers(containers))

    def send_values(self, values: Iterable[Union[StreamValues, Mapping[str, Any]]]) -> None:
        self._run(self._async.send_values(values))

    def send_message(
        self, payload: Any, message_type: MessageType, action: MessageAction = MessageAction.CREATE,
    ) -> None:
        self._run(self._async.send_message(payload, message_type, action=action))

    def close(self) -> None:
        try:
            self._run(self._async.close())
        finally:
            self._loop.close()

    def __enter__(self) -> "IngressClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
