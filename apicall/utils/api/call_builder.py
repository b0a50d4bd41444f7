# apicall/utils/api/call_builder.py

from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar, Union
import inspect
import logging

from ...core.exceptions import (
    HandlerResultTypeError,
    MissingEndpointError,
    MissingMethodError,
    UnhandledStatusError,
    UnsupportedMethodError
)
from .api_client import APIClient, get_default_client
from .content import MediaType, as_media_type
from .request_builder import RequestMethod
from .response_handler import ApiResponse

S = TypeVar('S')
F = TypeVar('F')
logger = logging.getLogger(__name__)

StatusHandler = Callable[[ApiResponse], Union[Any, Awaitable[Any]]]
DefaultHandler = Callable[[Optional[int], str], Union[Any, Awaitable[Any]]]

class ApiCallBuilder(Generic[S, F]):
    """
    Fluent, single-use configuration of one API call.

    Usage::

        result = await (
            ApiCallBuilder(Product, ErrorBody)
            .set_endpoint("https://api.example.com/products")
            .set_method("GET")
            .add_query_param("ids", [1, 2, 3])
            .add_status_handler(200, lambda r: r.success_response)
            .set_default_handler(lambda status, message: None)
            .execute()
        )
    """

    def __init__(
        self,
        success_type: Any = None,
        failure_type: Any = None,
        client: Optional[APIClient] = None
    ):
        self.success_type = success_type
        self.failure_type = failure_type
        self._client = client
        self._endpoint: Optional[str] = None
        self._method: Optional[RequestMethod] = None
        self._content_type = MediaType.APPLICATION_JSON
        self._accept_type = MediaType.APPLICATION_JSON
        self._headers: Optional[Dict[str, str]] = None
        self._query_params: Optional[Dict[str, Any]] = None
        self._body: Any = None
        self._status_handlers: Dict[int, StatusHandler] = {}
        self._default_handler: Optional[DefaultHandler] = None

    def set_endpoint(self, endpoint: str) -> "ApiCallBuilder[S, F]":
        self._endpoint = endpoint
        return self

    def set_method(self, method: Union[RequestMethod, str]) -> "ApiCallBuilder[S, F]":
        if isinstance(method, str):
            try:
                method = RequestMethod(method.upper())
            except ValueError:
                raise UnsupportedMethodError(f"HTTP method {method} is not supported.")
        self._method = method
        return self

    def set_content_type(self, content_type: Union[MediaType, str]) -> "ApiCallBuilder[S, F]":
        self._content_type = as_media_type(content_type)
        return self

    def set_accept_type(self, accept_type: Union[MediaType, str]) -> "ApiCallBuilder[S, F]":
        self._accept_type = as_media_type(accept_type)
        return self

    def set_headers(self, headers: Dict[str, str]) -> "ApiCallBuilder[S, F]":
        self._headers = dict(headers)
        return self

    def add_header(self, key: str, value: str) -> "ApiCallBuilder[S, F]":
        if self._headers is None:
            self._headers = {}
        self._headers[key] = value
        return self

    def set_body(self, body: Any) -> "ApiCallBuilder[S, F]":
        self._body = body
        return self

    def set_query_params(self, query_params: Dict[str, Any]) -> "ApiCallBuilder[S, F]":
        self._query_params = dict(query_params)
        return self

    def add_query_param(self, key: str, value: Any) -> "ApiCallBuilder[S, F]":
        if self._query_params is None:
            self._query_params = {}
        self._query_params[key] = value
        return self

    def add_status_handler(self, status_code: int, handler: StatusHandler) -> "ApiCallBuilder[S, F]":
        """Register a handler for one exact status code; re-registering replaces it"""
        self._status_handlers[int(status_code)] = handler
        return self

    def set_default_handler(self, handler: DefaultHandler) -> "ApiCallBuilder[S, F]":
        """Register the handler for status codes without a specific handler"""
        self._default_handler = handler
        return self

    async def _send(self) -> ApiResponse:
        client = self._client or get_default_client()
        common = {
            "content_type": self._content_type,
            "accept_type": self._accept_type,
            "headers": self._headers,
            "query_params": self._query_params
        }

        if self._method is RequestMethod.GET:
            return await client.get(self._endpoint, self.success_type, self.failure_type, **common)
        if self._method is RequestMethod.POST:
            return await client.post(
                self._endpoint, self.success_type, self.failure_type, body=self._body, **common
            )
        if self._method is RequestMethod.DELETE:
            return await client.delete(self._endpoint, self.success_type, self.failure_type, **common)
        raise UnsupportedMethodError(f"HTTP method {self._method.value} is not supported.")

    async def execute(self, result_type: Optional[type] = None) -> Any:
        """
        Dispatch the call and route the response to its handler

        Args:
            result_type: Expected type of the handler result; None skips the check

        Returns:
            The value produced by the matching handler
        """
        if not self._endpoint:
            raise MissingEndpointError("Endpoint must be set before executing the API call.")
        if self._method is None:
            raise MissingMethodError("HTTP method must be set before executing the API call.")
        if self._method not in (RequestMethod.GET, RequestMethod.POST, RequestMethod.DELETE):
            raise UnsupportedMethodError(f"HTTP method {self._method.value} is not supported.")

        response = await self._send()

        handler = self._status_handlers.get(response.status_code) if response.status_code is not None else None
        if handler is not None:
            result = await _call_handler(handler, response)
            return _check_result(result, result_type, f"Handler for status {response.status_code}")

        if self._default_handler is not None:
            result = await _call_handler(
                self._default_handler, response.status_code, response.error_message or ""
            )
            return _check_result(result, result_type, "Default handler")

        logger.error(f"No handler registered for status {response.status_code}")
        raise UnhandledStatusError(response.status_code, response.raw_content)

async def _call_handler(handler: Callable[..., Any], *args: Any) -> Any:
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result

def _check_result(result: Any, result_type: Optional[type], source: str) -> Any:
    if result_type is not None and not isinstance(result, result_type):
        raise HandlerResultTypeError(
            f"{source} returned unexpected type. Expected {result_type.__name__}, "
            f"got {type(result).__name__}",
            details={"expected": result_type.__name__, "actual": type(result).__name__}
        )
    return result
