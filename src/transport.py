"""
Transport - Authenticated HTTP execution against the ChatBotKit API.

Executes one request per call and returns the raw response body, or raises
a classified error. Holds no state beyond the base URL, token and timeout
given at construction.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from errors import (
    BodyReadError,
    ConnectionFailedError,
    RequestError,
    TransportTimeoutError,
    remote_error_for_status,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.chatbotkit.com/v1"
DEFAULT_TIMEOUT = 30.0

# GET for fetch/list, POST for create/update/delete
ALLOWED_METHODS = ("GET", "POST")


class Transport:
    """
    Executes authenticated JSON requests against a single base endpoint.

    Every request carries the bearer token and JSON content headers. A
    single timeout covers the whole request/response cycle.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def __repr__(self) -> str:
        return f"Transport(base_url={self._base_url!r}, timeout={self._timeout})"

    def _get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for API requests."""
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _encode_body(self, body: Any) -> Optional[bytes]:
        if body is None:
            return None
        try:
            return json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestError(f"failed to marshal request body: {e}") from e

    async def execute(self, method: str, path: str, body: Any = None) -> bytes:
        """
        Execute one request and return the response body bytes.

        Args:
            method: 'GET' or 'POST'
            path: Server-relative route, starting with '/'
            body: Optional JSON-serializable payload

        Returns:
            The raw response body of a 2xx response.

        Raises:
            RequestError: The request could not be constructed.
            TransportTimeoutError: The call exceeded the timeout.
            ConnectionFailedError: The connection failed.
            BodyReadError: The response body could not be read.
            RemoteError: The API answered with a non-2xx status
                (NotFoundError for 404).
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise RequestError(f"unsupported method: {method}")
        if not path.startswith("/"):
            raise RequestError(f"path must start with '/': {path!r}")

        payload = self._encode_body(body)
        url = f"{self._base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self._timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(
                    method, url, data=payload, headers=self._get_headers()
                ) as response:
                    try:
                        data = await response.read()
                    except asyncio.TimeoutError:
                        raise
                    except aiohttp.ClientError as e:
                        raise BodyReadError(
                            f"failed to read response body: {e}"
                        ) from e
                    status = response.status
        except asyncio.TimeoutError as e:
            raise TransportTimeoutError(
                f"request {method} {path} timed out after {self._timeout}s"
            ) from e
        except aiohttp.InvalidURL as e:
            raise RequestError(f"failed to create request: {e}") from e
        except aiohttp.ClientError as e:
            raise ConnectionFailedError(f"failed to execute request: {e}") from e
        except ValueError as e:
            # Never echo the rejected value; it may be the token
            raise RequestError(
                "failed to create request: invalid header or URL value"
            ) from e

        logger.debug(f"{method} {path} -> {status}")

        if status < 200 or status >= 300:
            raise remote_error_for_status(status, data)

        return data
