from typing import Optional

import httpx


def make_client(
    base_url: str,
    headers: dict,
    timeout: float = 8.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        http2=transport is None,
        timeout=httpx.Timeout(timeout, read=30.0),
        limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
        transport=transport,
    )
