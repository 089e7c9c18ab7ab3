"""Shared fixtures: a fake identity + OMF endpoint behind httpx.MockTransport."""

import json
from typing import Any, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from omf_ingress import AsyncIngressClient, OmfMessage

BASE_URL = "https://ingress.example.com"
TENANT = "tenant-1"
NAMESPACE = "ns-1"
OMF_PATH = f"/api/tenants/{TENANT}/namespaces/{NAMESPACE}/omf2"
TOKEN_PATH = "/identity/connect/token"


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeIngress:
    """Records requests and answers them like the identity and OMF services."""

    def __init__(self):
        self.token_requests: list[httpx.Request] = []
        self.omf_requests: list[httpx.Request] = []
        self.token_responses: list[httpx.Response] = []
        self.omf_status = 202
        self.omf_body = ""
        self.issued = 0

    def token_response(self, status: int = 200, payload: Optional[Any] = None, text: Optional[str] = None) -> None:
        """Queue an identity response; defaults to a fresh token valid for an hour."""
        if text is not None:
            self.token_responses.append(httpx.Response(status, text=text))
        else:
            self.token_responses.append(httpx.Response(status, json=payload))

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_requests.append(request)
            if self.token_responses:
                return self.token_responses.pop(0)
            self.issued += 1
            return httpx.Response(200, json={"access_token": f"T{self.issued}", "expires_in": 3600})
        if request.url.path == OMF_PATH:
            self.omf_requests.append(request)
            return httpx.Response(self.omf_status, text=self.omf_body)
        return httpx.Response(404, text="not found")

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def form(self, index: int = -1) -> dict[str, str]:
        parsed = parse_qs(self.token_requests[index].content.decode("utf-8"))
        return {k: v[0] for k, v in parsed.items()}

    def message(self, index: int = -1) -> OmfMessage:
        request = self.omf_requests[index]
        return OmfMessage.from_http_headers(request.headers, request.content)

    def payload(self, index: int = -1) -> Any:
        msg = self.message(index)
        msg.decompress()
        return json.loads(msg.body)


@pytest.fixture
def fake():
    return FakeIngress()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_client(fake, clock):
    def _make(**kwargs: Any) -> AsyncIngressClient:
        return AsyncIngressClient(
            service_url=BASE_URL,
            tenant_id=TENANT,
            namespace_id=NAMESPACE,
            client_id="client-id",
            client_secret="client-secret",
            transport=fake.transport(),
            clock=clock,
            **kwargs,
        )
    return _make
