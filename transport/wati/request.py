"""
Inbound Request Adapters

Narrow view of an inbound webhook delivery, independent of the HTTP
server that received it. One adapter per host:

- StarletteInboundRequest: FastAPI / Starlette requests
- StaticInboundRequest: in-memory deliveries (other hosts, replays, tests)
"""

from typing import Any, Mapping, Optional, Protocol, Union

from fastapi import Request

BodyField = Union[bytes, bytearray, str, None]


class InboundRequest(Protocol):
    """What payload acquisition needs to know about a delivery."""

    def get_parsed_body(self) -> Any:
        """Body already parsed by the host, if any."""

    async def get_raw_bytes(self) -> Optional[bytes]:
        """Drain the underlying byte stream. May raise if already consumed."""

    def get_direct_body_field(self) -> BodyField:
        """Body attached directly to the request object, if any."""

    def get_headers(self) -> Mapping[str, str]:
        ...

    def get_query(self) -> Mapping[str, str]:
        ...

    def get_method(self) -> str:
        ...


class StarletteInboundRequest:
    """
    Adapter over a Starlette request.

    Middleware sitting in front of the webhook (proxies, signature
    checkers) may already have parsed or buffered the body. They publish
    it on ``request.state.parsed_body`` / ``request.state.raw_body``.
    """

    def __init__(self, request: Request):
        self._request = request

    def get_parsed_body(self) -> Any:
        return getattr(self._request.state, "parsed_body", None)

    async def get_raw_bytes(self) -> Optional[bytes]:
        # Starlette caches the body after the first read; a stream consumed
        # elsewhere without caching raises RuntimeError here.
        return await self._request.body()

    def get_direct_body_field(self) -> BodyField:
        return getattr(self._request.state, "raw_body", None)

    def get_headers(self) -> Mapping[str, str]:
        return self._request.headers

    def get_query(self) -> Mapping[str, str]:
        return self._request.query_params

    def get_method(self) -> str:
        return self._request.method


class StaticInboundRequest:
    """
    In-memory delivery.

    ``stream`` behaves like an unconsumed request stream: the first
    ``get_raw_bytes`` call returns it, later calls return nothing.
    """

    def __init__(
        self,
        parsed_body: Any = None,
        stream: Optional[bytes] = None,
        body: BodyField = None,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, str]] = None,
        method: str = "POST",
    ):
        self._parsed_body = parsed_body
        self._stream = stream
        self._body = body
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}
        self._query = dict(query or {})
        self._method = method.upper()

    def get_parsed_body(self) -> Any:
        return self._parsed_body

    async def get_raw_bytes(self) -> Optional[bytes]:
        data, self._stream = self._stream, None
        return data

    def get_direct_body_field(self) -> BodyField:
        return self._body

    def get_headers(self) -> Mapping[str, str]:
        return self._headers

    def get_query(self) -> Mapping[str, str]:
        return self._query

    def get_method(self) -> str:
        return self._method
