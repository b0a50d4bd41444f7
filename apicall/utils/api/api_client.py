# apicall/utils/api/api_client.py

from typing import Any, Dict, Mapping, Optional, Union

from ...core.logger import Logger
from .content import MediaType, as_media_type, mime_of, serialize_body
from .request_builder import RequestMethod, build_uri, create_body, create_request
from .response_handler import ApiResponse, ResponseHandler
from .transport import HttpTransport

MediaTypeLike = Union[MediaType, str]

class APIClient:
    """
    Issues single HTTP exchanges and returns classified responses.

    This class provides:
    - GET/POST/DELETE operations
    - URI and query string assembly
    - Request body serialization per content type
    - Typed success/failure response parsing
    - Optional response logging through Logger

    Configuration errors are raised before any network activity;
    transport errors are captured on the returned ApiResponse.
    """

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        logger: Optional[Logger] = None
    ):
        self.transport = transport
        self.logger = logger
        self._handler = ResponseHandler(transport)

    async def close(self) -> None:
        """Close the client's own transport, if it has one"""
        if self.transport is not None:
            await self.transport.close()

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _log(self, response: ApiResponse, action: str) -> ApiResponse:
        if self.logger is not None:
            self.logger.log_api_response(response, type(self).__name__, action)
        return response

    async def get(
        self,
        base_url: str,
        success_type: Any = None,
        failure_type: Any = None,
        *,
        content_type: MediaTypeLike = MediaType.APPLICATION_JSON,
        accept_type: MediaTypeLike = MediaType.APPLICATION_JSON,
        query_params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        """
        Perform GET request

        Args:
            base_url: Absolute URL of the endpoint
            success_type: Type to parse 2xx bodies into
            failure_type: Type to parse 400 bodies into
            content_type: Request content type, sent as a header
            accept_type: Media type the response body is expected in
            query_params: Query parameters overlaid on base_url
            headers: Additional headers

        Returns:
            ApiResponse
        """
        content_type_str = mime_of(content_type)
        accept_type = as_media_type(accept_type)
        uri = build_uri(base_url, query_params)
        request = create_request(RequestMethod.GET, uri, content_type_str, headers)
        response = await self._handler.handle_request(request, accept_type, success_type, failure_type)
        return self._log(response, "get")

    async def post(
        self,
        base_url: str,
        success_type: Any = None,
        failure_type: Any = None,
        *,
        content_type: MediaTypeLike = MediaType.APPLICATION_JSON,
        accept_type: MediaTypeLike = MediaType.APPLICATION_JSON,
        headers: Optional[Dict[str, str]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        body: Any = None
    ) -> ApiResponse:
        """
        Perform POST request

        A None body sends an empty entity tagged with content_type.
        """
        content_type_str = mime_of(content_type)
        accept_type = as_media_type(accept_type)
        uri = build_uri(base_url, query_params)
        request = create_request(RequestMethod.POST, uri, content_type_str, headers)

        if body is not None:
            serialized_body = serialize_body(body, content_type)
            request.body = create_body(serialized_body, content_type_str)

        response = await self._handler.handle_request(request, accept_type, success_type, failure_type)
        return self._log(response, "post")

    async def delete(
        self,
        base_url: str,
        success_type: Any = None,
        failure_type: Any = None,
        *,
        content_type: MediaTypeLike = MediaType.APPLICATION_JSON,
        accept_type: MediaTypeLike = MediaType.APPLICATION_JSON,
        headers: Optional[Dict[str, str]] = None,
        query_params: Optional[Mapping[str, Any]] = None
    ) -> ApiResponse:
        """Perform DELETE request"""
        content_type_str = mime_of(content_type)
        accept_type = as_media_type(accept_type)
        uri = build_uri(base_url, query_params)
        request = create_request(RequestMethod.DELETE, uri, content_type_str, headers)
        response = await self._handler.handle_request(request, accept_type, success_type, failure_type)
        return self._log(response, "delete")

_default_client: Optional[APIClient] = None

def get_default_client() -> APIClient:
    """Return the shared client used by the module-level operations"""
    global _default_client
    if _default_client is None:
        _default_client = APIClient()
    return _default_client

async def get(base_url: str, success_type: Any = None, failure_type: Any = None, **kwargs: Any) -> ApiResponse:
    """Perform GET request through the shared transport"""
    return await get_default_client().get(base_url, success_type, failure_type, **kwargs)

async def post(base_url: str, success_type: Any = None, failure_type: Any = None, **kwargs: Any) -> ApiResponse:
    """Perform POST request through the shared transport"""
    return await get_default_client().post(base_url, success_type, failure_type, **kwargs)

async def delete(base_url: str, success_type: Any = None, failure_type: Any = None, **kwargs: Any) -> ApiResponse:
    """Perform DELETE request through the shared transport"""
    return await get_default_client().delete(base_url, success_type, failure_type, **kwargs)
