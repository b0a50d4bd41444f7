"""Test module for request assembly."""
# apicall/tests/test_request_builder.py

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

import yarl

from apicall.core.exceptions import InvalidBaseUrlError, InvalidSerializedBodyTypeError
from apicall.utils.api.request_builder import (
    PreparedRequest,
    RequestBody,
    RequestMethod,
    build_uri,
    create_body,
    create_request,
    format_query_value
)

class Sort(Enum):
    ASC = "asc"

def test_build_uri_overlays_existing_query():
    """Caller-supplied keys win over keys already in the base URL"""
    uri = build_uri("https://api.example.com/products?x=1", {"x": 2, "y": "a,b"})
    assert isinstance(uri, yarl.URL)
    assert uri.path == "/products"
    assert uri.query["x"] == "2"
    assert uri.query["y"] == "a,b"
    assert len(uri.query.getall("x")) == 1

def test_build_uri_keeps_existing_query_without_params():
    uri = build_uri("https://api.example.com/items?page=3")
    assert uri.query["page"] == "3"

@pytest.mark.parametrize("base_url", ["", "   ", None, "/relative/path"])
def test_build_uri_invalid_base_url(base_url):
    with pytest.raises(InvalidBaseUrlError):
        build_uri(base_url, {"a": 1})

@pytest.mark.parametrize("value,expected", [
    (None, ""),
    (True, "true"),
    (False, "false"),
    (42, "42"),
    (1.5, "1.5"),
    (Decimal("1000.50"), "1000.50"),
    ("text", "text"),
    (["a", "b", "c"], "a,b,c"),
    ((1, 2, 3), "1,2,3"),
    (date(2024, 5, 6), "2024-05-06"),
    (datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc), "2024-05-06T07:08:09.000000+00:00"),
    (Sort.ASC, "asc"),
])
def test_format_query_value(value, expected):
    assert format_query_value(value) == expected

def test_format_query_value_mixed_sequence_falls_back_to_str():
    assert format_query_value(["a", 1]) == str(["a", 1])

def test_build_uri_formats_values():
    uri = build_uri(
        "https://api.example.com/search",
        {"ids": [1, 2], "since": datetime(2024, 1, 1), "empty": None}
    )
    assert uri.query["ids"] == "1,2"
    assert uri.query["since"] == "2024-01-01T00:00:00.000000"
    assert uri.query["empty"] == ""

@pytest.mark.parametrize("method", [RequestMethod.POST, RequestMethod.PUT, RequestMethod.PATCH])
def test_create_request_body_methods(method):
    """Entity methods carry the content type on an empty body"""
    request = create_request(method, build_uri("https://api.example.com"), "application/json")
    assert isinstance(request, PreparedRequest)
    assert request.body == RequestBody(data=b"", content_type="application/json")
    assert "Content-Type" not in request.headers
    assert request.wire_headers()["Content-Type"] == "application/json"

@pytest.mark.parametrize("method", [RequestMethod.GET, RequestMethod.DELETE, RequestMethod.HEAD, RequestMethod.OPTIONS, "options"])
def test_create_request_bodyless_methods(method):
    """Bodyless methods carry the content type as a bare header"""
    request = create_request(method, "https://api.example.com", "text/plain")
    assert request.body is None
    assert request.headers["Content-Type"] == "text/plain"

def test_create_request_caller_headers_win():
    request = create_request(
        "post",
        "https://api.example.com",
        "application/json",
        {"content-type": "application/vnd.custom+json", "X-Trace": "abc"}
    )
    assert request.method is RequestMethod.POST
    wire = request.wire_headers()
    assert wire["Content-Type"] == "application/vnd.custom+json"
    assert len(wire.getall("Content-Type")) == 1
    assert wire["X-Trace"] == "abc"

def test_create_body_text_and_bytes():
    text_body = create_body('{"a": "é"}', "application/json")
    assert text_body.data == '{"a": "é"}'.encode("utf-8")
    assert text_body.content_type == "application/json; charset=utf-8"

    binary_body = create_body(b"\x00\xff", "image/png")
    assert binary_body.data == b"\x00\xff"
    assert binary_body.content_type == "image/png"

def test_create_body_invalid_type():
    with pytest.raises(InvalidSerializedBodyTypeError):
        create_body({"a": 1}, "application/json")
