"""HTTP GET primitive used to reach metadata endpoints."""

import logging
from typing import Awaitable, Callable, NamedTuple, Optional

import httpx

from .exceptions import TransportError

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 5.0


class HttpResponse(NamedTuple):
    status: int
    body: str


Fetch = Callable[[str], Awaitable[HttpResponse]]


async def httpx_fetch(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> HttpResponse:
    """Issue a GET request and return its status and trimmed body.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Returns:
        Status code and body of the response

    Raises:
        TransportError: If the endpoint cannot be reached or times out
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning(f"GET {url} failed: {e}")
        raise TransportError(url, str(e) or e.__class__.__name__) from e

    logger.debug(f"GET {url} -> {response.status_code}")
    return HttpResponse(response.status_code, response.text.strip())


def make_fetch(timeout: float = DEFAULT_TIMEOUT) -> Fetch:
    """Build a fetch function bound to a timeout."""
    async def fetch(url: str) -> HttpResponse:
        return await httpx_fetch(url, timeout=timeout)
    return fetch
