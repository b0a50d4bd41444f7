# apicall/utils/api/__init__.py

"""
API utilities for making HTTP requests and handling responses.
"""

from .content import (
    MediaType,
    mime_of,
    serialize_body,
    deserialize_content
)

from .request_builder import (
    RequestMethod,
    RequestBody,
    PreparedRequest,
    build_uri,
    create_request,
    create_body
)

from .transport import (
    HttpTransport,
    TransportResult,
    get_default_transport,
    close_default_transport
)

from .response_handler import (
    ApiResponse,
    ResponseHandler
)

from .api_client import (
    APIClient,
    get,
    post,
    delete
)

from .call_builder import ApiCallBuilder

__all__ = [
    'MediaType',
    'mime_of',
    'serialize_body',
    'deserialize_content',
    'RequestMethod',
    'RequestBody',
    'PreparedRequest',
    'build_uri',
    'create_request',
    'create_body',
    'HttpTransport',
    'TransportResult',
    'get_default_transport',
    'close_default_transport',
    'ApiResponse',
    'ResponseHandler',
    'APIClient',
    'get',
    'post',
    'delete',
    'ApiCallBuilder'
]
