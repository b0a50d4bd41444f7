# apicall/utils/api/transport.py

from typing import Optional, Union
from dataclasses import dataclass
import asyncio
import logging
import ssl

import aiohttp
import certifi

from ...core.config import Config
from .request_builder import PreparedRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "apicall/1.0"

# Errors a transport exchange can end with; they are captured on the response
TRANSPORT_ERRORS = (aiohttp.ClientError, TimeoutError, OSError)

@dataclass
class TransportResult:
    """Raw outcome of one HTTP exchange"""
    status: int
    reason: Optional[str]
    content: str

class HttpTransport:
    """
    Pooled HTTP transport shared by API calls.

    One aiohttp session is created lazily inside the running event loop
    and reused for every request until close() is called. Certificates
    are verified against the certifi bundle unless verify_ssl is False.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        ca_file: Optional[str] = None
    ):
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

        if verify_ssl:
            self._ssl: Union[ssl.SSLContext, bool] = ssl.create_default_context(
                cafile=ca_file or certifi.where()
            )
        else:
            logger.warning("TLS certificate verification is disabled for this transport")
            self._ssl = False

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "HttpTransport":
        """Create a transport from the transport.* configuration section"""
        config = config or Config()
        return cls(
            timeout=float(config.get("transport.timeout", DEFAULT_TIMEOUT)),
            verify_ssl=config.get("transport.verify_ssl", True),
            user_agent=config.get("transport.user_agent", DEFAULT_USER_AGENT),
            ca_file=config.get("transport.ca_file")
        )

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session bound to the running event loop"""
        loop = asyncio.get_running_loop()
        if self._session is not None and self._loop is not loop:
            # A session cannot outlive the loop it was created in
            logger.debug("Event loop changed, discarding the previous session")
            self._session = None
        if self._session is None or self._session.closed:
            self._loop = loop
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent}
            )
        return self._session

    async def close(self) -> None:
        """Close the underlying session"""
        if self._session and not self._session.closed and self._loop is asyncio.get_running_loop():
            await self._session.close()
        self._session = None
        self._loop = None
        self._loop = None

    async def send(self, request: PreparedRequest) -> TransportResult:
        """
        Perform one HTTP exchange

        Args:
            request: Assembled request

        Returns:
            TransportResult with the status and body text
        """
        session = await self._get_session()
        data = request.body.data if request.body is not None else None

        logger.debug(f"{request.method.value} {request.url}")
        async with session.request(
            request.method.value,
            request.url,
            headers=request.wire_headers(),
            data=data,
            ssl=self._ssl
        ) as response:
            content = await response.text(errors="replace")
            logger.debug(f"{request.method.value} {request.url} -> {response.status}")
            return TransportResult(
                status=response.status,
                reason=response.reason,
                content=content
            )

_default_transport: Optional[HttpTransport] = None

def get_default_transport() -> HttpTransport:
    """Return the process-wide transport, creating it from Config on first use"""
    global _default_transport
    if _default_transport is None:
        _default_transport = HttpTransport.from_config()
    return _default_transport

async def close_default_transport() -> None:
    """Close and forget the process-wide transport"""
    global _default_transport
    if _default_transport is not None:
        await _default_transport.close()
        _default_transport = None
