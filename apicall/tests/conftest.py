"""Global test configuration and fixtures."""
import os
import pytest
from unittest.mock import AsyncMock, MagicMock

from apicall.utils.api.transport import HttpTransport, TransportResult

@pytest.fixture(autouse=True)
def clean_env():
    """Clean APICALL_ environment variables before and after each test"""
    saved_vars = {k: v for k, v in os.environ.items() if k.startswith("APICALL_")}
    for key in saved_vars:
        del os.environ[key]

    yield

    for key in list(os.environ.keys()):
        if key.startswith("APICALL_"):
            del os.environ[key]
    os.environ.update(saved_vars)

@pytest.fixture
def mock_aiohttp_response():
    """Factory for the async context manager returned by ClientSession.request"""
    def _make(status=200, text="", reason="OK"):
        mock_response = MagicMock()
        mock_response.status = status
        mock_response.reason = reason
        mock_response.text = AsyncMock(return_value=text)

        mock_cm = AsyncMock()
        mock_cm.__aenter__.return_value = mock_response
        mock_cm.__aexit__.return_value = None
        return mock_cm
    return _make

@pytest.fixture
def fake_transport():
    """Factory for a transport whose send() returns a fixed result or raises"""
    def _make(status=200, content="", reason="OK", error=None):
        transport = MagicMock(spec=HttpTransport)
        if error is not None:
            transport.send = AsyncMock(side_effect=error)
        else:
            transport.send = AsyncMock(
                return_value=TransportResult(status=status, reason=reason, content=content)
            )
        transport.close = AsyncMock()
        return transport
    return _make
