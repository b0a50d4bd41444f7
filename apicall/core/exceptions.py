from typing import Any, Dict, Optional

class ApiCallError(Exception):
    """Base exception class for all apicall exceptions"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ConfigError(ApiCallError):
    """Raised when there is a configuration error"""
    pass

class LoggerError(ApiCallError):
    """Raised when there is a logging error"""
    pass

class RequestConfigurationError(ApiCallError):
    """Raised before any network activity when a call is misconfigured"""
    pass

class UnsupportedMediaTypeError(RequestConfigurationError):
    """Raised when a media type is unknown or has no codec"""
    pass

class UnsupportedBodyShapeError(RequestConfigurationError):
    """Raised when a request body does not fit the chosen content type"""
    pass

class InvalidBaseUrlError(RequestConfigurationError):
    """Raised when the base URL is empty or not absolute"""
    pass

class MissingEndpointError(RequestConfigurationError):
    """Raised when a call is dispatched without an endpoint"""
    pass

class MissingMethodError(RequestConfigurationError):
    """Raised when a call is dispatched without an HTTP method"""
    pass

class UnsupportedMethodError(RequestConfigurationError):
    """Raised when a call is dispatched with a method other than GET/POST/DELETE"""
    pass

class ContentError(ApiCallError):
    """Raised when converting between wire content and Python objects fails"""
    pass

class ContentConversionError(ContentError):
    """Raised when content cannot be converted to the requested type"""
    pass

class UnsupportedTargetTypeError(ContentError):
    """Raised when a codec cannot produce the requested target type"""
    pass

class InvalidSerializedBodyTypeError(ContentError):
    """Raised when a serialized body is neither text nor bytes"""
    pass

class DispatchError(ApiCallError):
    """Raised when a built call cannot route its response to a handler"""
    pass

class UnhandledStatusError(DispatchError):
    """Raised when no handler is registered for the returned status code"""
    def __init__(self, status_code: Optional[int], raw_content: str):
        super().__init__(
            f"Unhandled HTTP status code: {status_code}, Content: {raw_content}",
            details={"status_code": status_code, "raw_content": raw_content}
        )
        self.status_code = status_code
        self.raw_content = raw_content

class HandlerResultTypeError(DispatchError):
    """Raised when a handler returns a value of the wrong type"""
    pass
