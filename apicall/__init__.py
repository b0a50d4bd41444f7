# apicall/__init__.py

"""
Generic asynchronous HTTP API client with typed response handling.
"""

from .core.exceptions import ApiCallError
from .utils.api import (
    APIClient,
    ApiCallBuilder,
    ApiResponse,
    HttpTransport,
    MediaType,
    RequestMethod
)

__version__ = "1.0.0"

__all__ = [
    'ApiCallError',
    'APIClient',
    'ApiCallBuilder',
    'ApiResponse',
    'HttpTransport',
    'MediaType',
    'RequestMethod'
]
