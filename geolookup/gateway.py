"""
Design (gateway.py)
- Purpose: Async HTTP client for the lookup backend: GET {base}/api/lookup/{ip}.
- Inputs: base URL (config.API_BASE_URL by default), an IP string per call.
- Outputs: LookupResult on success; raises GatewayError otherwise.
- Side effects: Network I/O through one aiohttp.ClientSession per gateway.
- Thread-safety: Use from the event loop that opened the session.

No request timeout is applied: a backend that never answers leaves the row loading.
"""

import logging
from urllib.parse import quote

import aiohttp

from .config import (
    API_BASE_URL,
    LOOKUP_PATH,
    LOOKUP_FALLBACK_MESSAGE,
    ERROR_BODY_UNPARSABLE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    MALFORMED_RESPONSE_MESSAGE,
)
from .models import LookupResult

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A lookup that did not produce a result. str(exc) is the user-facing message."""

    def __init__(self, message: str, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


def lookup_url(base_url: str, ip: str) -> str:
    return f"{base_url.rstrip('/')}{LOOKUP_PATH}{quote(ip, safe='')}"


class HttpLookupGateway:
    """
    Design (HttpLookupGateway)
    - Usage:
        async with HttpLookupGateway() as gateway:
            result = await gateway.lookup("8.8.8.8")
    - Error body shape from the backend: {"error": str, "code": str, "message": str}.
      `message` is used verbatim; missing -> "Lookup failed"; unparsable -> fixed text.
    """

    def __init__(self, base_url: str = API_BASE_URL, session: aiohttp.ClientSession | None = None):
        self.base_url = base_url
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "HttpLookupGateway":
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def lookup(self, ip: str) -> LookupResult:
        if self._session is None:
            raise RuntimeError("HttpLookupGateway used outside 'async with'")
        url = lookup_url(self.base_url, ip)
        logger.debug("GET %s", url)
        try:
            async with self._session.get(url) as resp:
                if resp.status < 200 or resp.status >= 300:
                    raise await self._error_from_response(resp)
                try:
                    payload = await resp.json(content_type=None)
                    return LookupResult.from_payload(payload)
                except ValueError as exc:
                    # json.JSONDecodeError is a ValueError too
                    logger.warning("malformed lookup response for %s: %s", ip, exc)
                    raise GatewayError(MALFORMED_RESPONSE_MESSAGE, status=resp.status) from exc
        except aiohttp.ClientError as exc:
            raise GatewayError(str(exc) or NETWORK_ERROR_MESSAGE) from exc

    @staticmethod
    async def _error_from_response(resp: aiohttp.ClientResponse) -> GatewayError:
        try:
            body = await resp.json(content_type=None)
        except (ValueError, aiohttp.ClientError):
            return GatewayError(ERROR_BODY_UNPARSABLE_MESSAGE, status=resp.status)
        if not isinstance(body, dict):
            return GatewayError(ERROR_BODY_UNPARSABLE_MESSAGE, status=resp.status)
        message = body.get("message")
        code = body.get("code")
        if not isinstance(message, str) or not message:
            message = LOOKUP_FALLBACK_MESSAGE
        return GatewayError(message, status=resp.status, code=code if isinstance(code, str) else None)
