# apicall/utils/api/request_builder.py

from typing import Any, Mapping, Optional, Union
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

from multidict import CIMultiDict
import yarl

from ...core.exceptions import InvalidBaseUrlError, InvalidSerializedBodyTypeError

class RequestMethod(Enum):
    """HTTP request methods"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

BODY_METHODS = frozenset({RequestMethod.POST, RequestMethod.PUT, RequestMethod.PATCH})
BODYLESS_METHODS = frozenset({RequestMethod.GET, RequestMethod.DELETE, RequestMethod.HEAD, RequestMethod.OPTIONS})

@dataclass
class RequestBody:
    """Serialized request entity and the content type it is tagged with"""
    data: bytes
    content_type: str

@dataclass
class PreparedRequest:
    """A fully assembled request, ready to hand to the transport"""
    method: RequestMethod
    url: yarl.URL
    headers: CIMultiDict = field(default_factory=CIMultiDict)
    body: Optional[RequestBody] = None

    def wire_headers(self) -> CIMultiDict:
        """Headers as sent: the body's content type, overridden by explicit headers"""
        headers: CIMultiDict = CIMultiDict()
        if self.body is not None:
            headers["Content-Type"] = self.body.content_type
        for key, value in self.headers.items():
            headers[key] = value
        return headers

def format_query_value(value: Any) -> str:
    """
    Format a query parameter value as locale-independent text

    None becomes an empty string, dates and times use ISO-8601, and
    sequences of str or int are comma-joined.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat(timespec="microseconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return format_query_value(value.value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
        if all(isinstance(item, str) for item in items):
            return ",".join(items)
        if all(isinstance(item, int) and not isinstance(item, bool) for item in items):
            return ",".join(str(item) for item in items)
    return str(value)

def build_uri(base_url: str, query_params: Optional[Mapping[str, Any]] = None) -> yarl.URL:
    """
    Build the target URI of a request

    Args:
        base_url: Absolute URL, possibly already carrying a query string
        query_params: Parameters to overlay on the existing query

    Returns:
        URL whose query holds the existing keys, overwritten by query_params
    """
    if base_url is None or not str(base_url).strip():
        raise InvalidBaseUrlError("Base URL cannot be null or empty.")

    url = yarl.URL(str(base_url).strip())
    if not url.is_absolute():
        raise InvalidBaseUrlError(f"Base URL must be absolute: {base_url}", details={"base_url": base_url})

    if query_params:
        url = url.update_query({
            str(key): format_query_value(value)
            for key, value in query_params.items()
        })
    return url

def create_request(
    method: Union[RequestMethod, str],
    uri: Union[yarl.URL, str],
    content_type: str,
    headers: Optional[Mapping[str, str]] = None
) -> PreparedRequest:
    """
    Create a request with its content type attached

    POST/PUT/PATCH carry the content type on an empty body; GET/DELETE/HEAD/OPTIONS
    carry it as a bare header. Explicit headers are applied last and win.
    """
    method = RequestMethod(method.upper()) if isinstance(method, str) else method
    request = PreparedRequest(method=method, url=yarl.URL(uri) if isinstance(uri, str) else uri)

    if method in BODY_METHODS:
        request.body = RequestBody(data=b"", content_type=content_type)
    elif method in BODYLESS_METHODS:
        request.headers["Content-Type"] = content_type

    if headers:
        for key, value in headers.items():
            request.headers[key] = value
    return request

def create_body(serialized_body: Union[str, bytes], mime_type: str) -> RequestBody:
    """Wrap a serialized body as a request entity tagged with mime_type"""
    if isinstance(serialized_body, str):
        return RequestBody(
            data=serialized_body.encode("utf-8"),
            content_type=f"{mime_type}; charset=utf-8"
        )
    if isinstance(serialized_body, (bytes, bytearray)):
        return RequestBody(data=bytes(serialized_body), content_type=mime_type)
    raise InvalidSerializedBodyTypeError(
        f"Unexpected serialized body type: {type(serialized_body).__name__}"
    )
