# apicall/utils/api/content.py

"""
Content codec: media types and conversion between Python objects and wire content.

The content type of a call is declared by the caller rather than sniffed
from response headers, so every conversion here is decided by a MediaType.
"""

from typing import Any, Dict, Iterable, List, Mapping, Union
from dataclasses import fields, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from urllib.parse import parse_qs, quote
import base64
import binascii
import io
import json
import logging
import os
import types
import typing

from ...core.exceptions import (
    ContentConversionError,
    UnsupportedBodyShapeError,
    UnsupportedMediaTypeError,
    UnsupportedTargetTypeError
)

logger = logging.getLogger(__name__)

JSON_NAME_KEY = "json"

class MediaType(Enum):
    """Supported wire content kinds, valued by their MIME string"""
    APPLICATION_JSON = "application/json"
    FORM_URL_ENCODED = "application/x-www-form-urlencoded"
    TEXT_PLAIN = "text/plain"
    APPLICATION_XML = "application/xml"
    APPLICATION_PDF = "application/pdf"
    IMAGE_JPEG = "image/jpeg"
    IMAGE_PNG = "image/png"
    APPLICATION_OCTET_STREAM = "application/octet-stream"
    TEXT_HTML = "text/html"
    TEXT_CSV = "text/csv"

    @property
    def mime_type(self) -> str:
        return mime_of(self)

BINARY_MEDIA_TYPES = frozenset({
    MediaType.IMAGE_JPEG,
    MediaType.IMAGE_PNG,
    MediaType.APPLICATION_OCTET_STREAM
})

# Declared but without a codec yet
UNIMPLEMENTED_MEDIA_TYPES = frozenset({
    MediaType.APPLICATION_XML,
    MediaType.APPLICATION_PDF,
    MediaType.TEXT_HTML,
    MediaType.TEXT_CSV
})

_STREAM_TARGETS = (io.BytesIO, io.IOBase, io.BufferedIOBase, typing.BinaryIO, typing.IO)
_RAW_TARGETS = (None, Any, object)

def mime_of(media_type: Union[MediaType, str]) -> str:
    """
    Return the MIME string for a media type

    Args:
        media_type: MediaType member, or the MIME string of one

    Returns:
        MIME string such as "application/json"
    """
    if isinstance(media_type, MediaType):
        return media_type.value
    if isinstance(media_type, str):
        try:
            return MediaType(media_type).value
        except ValueError:
            pass
    raise UnsupportedMediaTypeError(
        f"Unsupported media type: {media_type!r}",
        details={"media_type": repr(media_type)}
    )

def as_media_type(media_type: Union[MediaType, str]) -> MediaType:
    """Coerce a MediaType or MIME string into a MediaType member"""
    return MediaType(mime_of(media_type))

# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def serialize_body(body: Any, media_type: Union[MediaType, str]) -> Union[str, bytes]:
    """
    Serialize a request body for the given media type

    Args:
        body: Object to send
        media_type: Content type of the request

    Returns:
        str for textual media types, bytes for binary ones
    """
    media_type = as_media_type(media_type)

    if media_type is MediaType.APPLICATION_JSON:
        return _serialize_json(body)
    if media_type is MediaType.FORM_URL_ENCODED:
        return _serialize_form_url_encoded(body)
    if media_type is MediaType.TEXT_PLAIN:
        return "" if body is None else str(body)
    if media_type in BINARY_MEDIA_TYPES:
        return _serialize_binary(body)
    raise UnsupportedMediaTypeError(f"Unsupported content type for serialization: {media_type.value}")

def _wire_name(field) -> str:
    return field.metadata.get(JSON_NAME_KEY, field.name)

def _json_default(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {_wire_name(f): getattr(value, f.name) for f in fields(value)}
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

def _serialize_json(body: Any) -> str:
    try:
        return json.dumps(body, default=_json_default)
    except (TypeError, ValueError) as e:
        raise UnsupportedBodyShapeError(f"Body cannot be serialized as JSON: {str(e)}")

def _serialize_form_url_encoded(body: Any) -> str:
    if isinstance(body, Mapping):
        items: Iterable[Any] = body.items()
    elif isinstance(body, Iterable) and not isinstance(body, (str, bytes, bytearray)):
        items = body
    else:
        raise UnsupportedBodyShapeError(
            "For form-urlencoded, body must be a mapping of str to str or an iterable of (str, str) pairs"
        )

    pairs: List[str] = []
    for item in items:
        try:
            key, value = item
        except (TypeError, ValueError):
            raise UnsupportedBodyShapeError(f"Form-urlencoded entry is not a key/value pair: {item!r}")
        if not isinstance(key, str) or not isinstance(value, str):
            raise UnsupportedBodyShapeError(
                f"Form-urlencoded keys and values must be str, got {type(key).__name__}={type(value).__name__}"
            )
        pairs.append(f"{quote(key, safe='')}={quote(value, safe='')}")
    return "&".join(pairs)

def _serialize_binary(body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)

    if isinstance(body, (str, os.PathLike)):
        try:
            path = Path(body)
            if path.is_file():
                return path.read_bytes()
        except (OSError, ValueError) as e:
            logger.debug(f"Binary body path could not be read: {str(e)}")
        raise UnsupportedBodyShapeError(
            f"Binary body path does not point to an existing file: {body}",
            details={"path": str(body)}
        )

    read = getattr(body, "read", None)
    if callable(read):
        data = read()
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        raise UnsupportedBodyShapeError("Binary body stream must produce bytes")

    raise UnsupportedBodyShapeError("For binary data, body must be bytes, a binary stream, or a valid file path")

# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------

def deserialize_content(content: str, media_type: Union[MediaType, str], target_type: Any = None) -> Any:
    """
    Deserialize wire content into an instance of target_type

    Args:
        content: Raw response text
        media_type: Content type the response is expected in
        target_type: Type to produce; None means the raw decoded value

    Returns:
        Deserialized object
    """
    media_type = as_media_type(media_type)

    if media_type is MediaType.APPLICATION_JSON:
        try:
            value = json.loads(content)
        except json.JSONDecodeError as e:
            raise ContentConversionError(f"Content is not valid JSON: {str(e)}")
        return _from_json_value(value, target_type)
    if media_type is MediaType.TEXT_PLAIN:
        if target_type in _RAW_TARGETS or target_type is str:
            return content
        raise UnsupportedTargetTypeError(f"Plain text cannot be returned as {_type_name(target_type)}")
    if media_type is MediaType.FORM_URL_ENCODED:
        return _deserialize_form_url_encoded(content, target_type)
    if media_type in BINARY_MEDIA_TYPES:
        return _deserialize_binary(content, target_type)
    raise UnsupportedMediaTypeError(f"Unsupported content type for deserialization: {media_type.value}")

def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", repr(target_type))

def _is_union(target_type: Any) -> bool:
    origin = typing.get_origin(target_type)
    return origin is Union or origin is types.UnionType

def _from_json_value(value: Any, target_type: Any) -> Any:
    if target_type in _RAW_TARGETS:
        return value

    if _is_union(target_type):
        args = typing.get_args(target_type)
        if value is None and type(None) in args:
            return None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _from_json_value(value, arg)
            except ContentConversionError:
                continue
        raise ContentConversionError(f"JSON value does not match any of {target_type}")

    origin = typing.get_origin(target_type)
    if origin is tuple:
        return _tuple_from_json(value, target_type)
    if origin in (list, set, frozenset):
        if not isinstance(value, list):
            raise ContentConversionError(f"Expected a JSON array for {target_type}, got {type(value).__name__}")
        args = typing.get_args(target_type)
        item_type = args[0] if args else Any
        return origin(_from_json_value(item, item_type) for item in value)
    if origin is dict:
        if not isinstance(value, dict):
            raise ContentConversionError(f"Expected a JSON object for {target_type}, got {type(value).__name__}")
        args = typing.get_args(target_type)
        value_type = args[1] if len(args) == 2 else Any
        return {key: _from_json_value(item, value_type) for key, item in value.items()}

    if not isinstance(target_type, type):
        raise UnsupportedTargetTypeError(f"Cannot deserialize JSON into {target_type!r}")

    if is_dataclass(target_type):
        return _dataclass_from_dict(value, target_type)
    from_dict = getattr(target_type, "from_dict", None)
    if callable(from_dict):
        try:
            return from_dict(value)
        except Exception as e:
            raise ContentConversionError(f"{target_type.__name__}.from_dict failed: {str(e)}")
    if issubclass(target_type, Enum):
        try:
            return target_type(value)
        except ValueError as e:
            raise ContentConversionError(str(e))
    if target_type in (datetime, date) and isinstance(value, str):
        try:
            return target_type.fromisoformat(value)
        except ValueError as e:
            raise ContentConversionError(str(e))
    if target_type is Decimal and isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise ContentConversionError(f"Cannot convert {value!r} to Decimal")
    if target_type is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if target_type is int and isinstance(value, bool):
        raise ContentConversionError("Expected an integer, got a boolean")
    if isinstance(value, target_type):
        return value

    raise ContentConversionError(
        f"Expected {target_type.__name__}, got JSON {type(value).__name__}"
    )

def _tuple_from_json(value: Any, target_type: Any) -> tuple:
    if not isinstance(value, list):
        raise ContentConversionError(f"Expected a JSON array for {target_type}, got {type(value).__name__}")

    args = typing.get_args(target_type)
    # tuple[int, ...] is homogeneous; tuple[int, str] is positional
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0] if args else Any
        return tuple(_from_json_value(item, item_type) for item in value)
    if len(value) != len(args):
        raise ContentConversionError(
            f"Expected {len(args)} items for {target_type}, got {len(value)}"
        )
    return tuple(_from_json_value(item, item_type) for item, item_type in zip(value, args))

def _type_hints(target_type: type) -> Dict[str, Any]:
    """Resolved annotations of target_type; unresolvable ones are a conversion error"""
    try:
        return typing.get_type_hints(target_type)
    except Exception as e:
        raise ContentConversionError(
            f"Cannot resolve type hints of {target_type.__name__}: {str(e)}",
            details={"target_type": target_type.__name__}
        )

def _dataclass_from_dict(data: Any, target_type: type) -> Any:
    if not isinstance(data, dict):
        raise ContentConversionError(
            f"Expected a JSON object for {target_type.__name__}, got {type(data).__name__}"
        )

    hints = _type_hints(target_type)
    kwargs: Dict[str, Any] = {}
    for f in fields(target_type):
        if not f.init:
            continue
        key = _wire_name(f)
        if key in data:
            kwargs[f.name] = _from_json_value(data[key], hints.get(f.name, Any))

    try:
        return target_type(**kwargs)
    except TypeError as e:
        raise ContentConversionError(f"Cannot build {target_type.__name__}: {str(e)}")

def _deserialize_form_url_encoded(content: str, target_type: Any) -> Any:
    form_data = {
        key: ",".join(values)
        for key, values in parse_qs(content, keep_blank_values=True).items()
    }

    if target_type in _RAW_TARGETS or target_type is dict:
        return form_data
    if not isinstance(target_type, type):
        raise UnsupportedTargetTypeError(f"Cannot populate {target_type!r} from form data")

    hints = _type_hints(target_type)

    if is_dataclass(target_type):
        kwargs = {
            f.name: _convert_form_value(form_data[f.name], hints.get(f.name, str), f.name)
            for f in fields(target_type)
            if f.init and f.name in form_data
        }
        try:
            return target_type(**kwargs)
        except TypeError as e:
            raise ContentConversionError(f"Cannot build {target_type.__name__}: {str(e)}")

    try:
        instance = target_type()
    except TypeError as e:
        raise UnsupportedTargetTypeError(
            f"{target_type.__name__} must be a dataclass or constructible without arguments: {str(e)}"
        )
    for name, hint in hints.items():
        if name in form_data:
            setattr(instance, name, _convert_form_value(form_data[name], hint, name))
    return instance

def _convert_form_value(raw: str, target_type: Any, name: str) -> Any:
    if _is_union(target_type):
        args = [arg for arg in typing.get_args(target_type) if arg is not type(None)]
        if raw == "" and len(args) < len(typing.get_args(target_type)):
            return None
        target_type = args[0]

    if target_type in _RAW_TARGETS or target_type is str:
        return raw

    try:
        if target_type is bool:
            lowered = raw.strip().lower()
            if lowered not in ("true", "false"):
                raise ValueError(f"{raw!r} is not a boolean")
            return lowered == "true"
        if target_type is Decimal:
            return Decimal(raw)
        if target_type in (datetime, date):
            return target_type.fromisoformat(raw)
        if isinstance(target_type, type) and issubclass(target_type, Enum):
            if raw in target_type.__members__:
                return target_type[raw]
            return target_type(raw)
        return target_type(raw)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise ContentConversionError(
            f"Cannot convert form field '{name}' value {raw!r} to {_type_name(target_type)}",
            details={"field": name, "value": raw, "error": str(e)}
        )

def _deserialize_binary(content: str, target_type: Any) -> Union[bytes, bytearray, io.BytesIO]:
    if target_type in _RAW_TARGETS:
        target_type = bytes
    if target_type not in (bytes, bytearray) and target_type not in _STREAM_TARGETS:
        raise UnsupportedTargetTypeError(
            f"For binary data, target must be bytes, bytearray or a binary stream, got {_type_name(target_type)}"
        )

    try:
        binary_data = base64.b64decode("".join(content.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ContentConversionError(f"Binary content is not valid base64: {str(e)}")

    if target_type is bytes:
        return binary_data
    if target_type is bytearray:
        return bytearray(binary_data)
    return io.BytesIO(binary_data)
