"""
Async HTTP transport for the identity and OMF endpoints.

One httpx.AsyncClient (and its connection pool) is shared by every request.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional

import httpx

from omf_ingress.errors import CancellationError, TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "omf-ingress-sdk/0.1.0"


class HttpClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._auth: Optional[httpx.Auth] = None
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/",
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_auth(self, auth: Optional[httpx.Auth]) -> None:
        self._auth = auth

    async def post_form(
        self, path: str, data: dict[str, str], cancel_event: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        """Unauthenticated form-encoded POST."""
        return await self._send(self._client.post(path, data=data), cancel_event)

    async def post_content(
        self,
        path: str,
        content: bytes,
        headers: dict[str, str],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        """Authenticated raw-body POST."""
        if self._auth is None:
            raise RuntimeError("No authentication configured. Call set_auth() first.")
        return await self._send(
            self._client.post(path, content=content, headers=headers, auth=self._auth),
            cancel_event,
        )

    async def _send(
        self, request: Awaitable[httpx.Response], cancel_event: Optional[asyncio.Event],
    ) -> httpx.Response:
        try:
            if cancel_event is None:
                return await request
            return await _cancellable(request, cancel_event)
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()


async def _cancellable(request: Awaitable[Any], cancel_event: asyncio.Event) -> Any:
    """Await ``request`` unless ``cancel_event`` is set first, in which case abort it."""
    if cancel_event.is_set():
        # Never scheduled, so close the coroutine to avoid a "never awaited" warning.
        close = getattr(request, "close", None)
        if close is not None:
            close()
        raise CancellationError()

    request_task = asyncio.ensure_future(request)
    cancel_task = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait({request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        cancel_task.cancel()
        await _abort(request_task)
        raise

    if request_task in done:
        cancel_task.cancel()
        return request_task.result()

    await _abort(request_task)
    raise CancellationError()


async def _abort(task: "asyncio.Future[Any]") -> None:
    """Cancel ``task`` and wait until it has actually finished."""
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.debug(f"Request failed while being cancelled: {e}")
