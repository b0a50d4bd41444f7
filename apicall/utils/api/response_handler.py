# apicall/utils/api/response_handler.py

from typing import Any, Dict, Generic, Optional, TypeVar, Union
from dataclasses import dataclass
from http import HTTPStatus
import logging

from .content import MediaType, deserialize_content
from .request_builder import PreparedRequest
from .transport import TRANSPORT_ERRORS, HttpTransport, get_default_transport

S = TypeVar('S')
F = TypeVar('F')
logger = logging.getLogger(__name__)

@dataclass
class ApiResponse(Generic[S, F]):
    """Outcome of one API exchange"""
    status_code: Optional[int] = None
    reason: Optional[str] = None
    raw_content: str = ""
    success_response: Optional[S] = None
    failure_response: Optional[F] = None
    is_ambiguous: bool = False
    error_message: Optional[str] = None
    exception: Optional[BaseException] = None

    @property
    def is_successful(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300

    @property
    def has_content(self) -> bool:
        return bool(self.raw_content)

    @property
    def status_name(self) -> str:
        """Symbolic name of the status code, e.g. INTERNAL_SERVER_ERROR"""
        if self.status_code is None:
            return "NO_RESPONSE"
        try:
            return HTTPStatus(self.status_code).name
        except ValueError:
            return (self.reason or "UNKNOWN").upper().replace(" ", "_")

    def as_dict(self) -> Dict[str, Any]:
        return {
            "status_code": self.status_code,
            "reason": self.reason,
            "raw_content": self.raw_content,
            "success_response": self.success_response,
            "failure_response": self.failure_response,
            "is_ambiguous": self.is_ambiguous,
            "error_message": self.error_message,
            "exception": repr(self.exception) if self.exception else None
        }

class ResponseHandler:
    """
    Sends requests and classifies their responses.

    Each response lands in exactly one outcome:
    - success (2xx, body parsed or empty)
    - ambiguous (2xx, body not parseable as the success type)
    - structured failure (400 with a body parsed as the failure type)
    - error message (every other status)
    - captured exception (the exchange itself failed)
    """

    def __init__(self, transport: Optional[HttpTransport] = None):
        """Initialize ResponseHandler"""
        self._transport = transport

    @property
    def transport(self) -> HttpTransport:
        return self._transport or get_default_transport()

    async def handle_request(
        self,
        request: PreparedRequest,
        accept_type: Union[MediaType, str],
        success_type: Any = None,
        failure_type: Any = None
    ) -> ApiResponse:
        """
        Perform the exchange and classify its outcome

        Args:
            request: Assembled request
            accept_type: Media type the response body is expected in
            success_type: Type to deserialize 2xx bodies into
            failure_type: Type to deserialize 400 bodies into

        Returns:
            ApiResponse; transport failures are captured, never raised
        """
        response: ApiResponse = ApiResponse()

        try:
            result = await self.transport.send(request)
        except TRANSPORT_ERRORS as e:
            logger.error(f"{request.method.value} {request.url} failed: {str(e)}")
            response.exception = e
            response.error_message = f"Exception occurred: {str(e) or type(e).__name__}"
            return response

        response.status_code = result.status
        response.reason = result.reason
        response.raw_content = result.content
        return self.process_response(response, accept_type, success_type, failure_type)

    def process_response(
        self,
        response: ApiResponse,
        accept_type: Union[MediaType, str],
        success_type: Any = None,
        failure_type: Any = None
    ) -> ApiResponse:
        """Classify a received response and populate its typed slots"""
        if response.is_successful:
            self._process_successful_response(response, accept_type, success_type)
        elif response.status_code == HTTPStatus.BAD_REQUEST and response.has_content:
            self._process_failure_response(response, accept_type, failure_type)
        else:
            response.error_message = (
                f"Request failed with status code: {response.status_code}:{response.status_name}"
            )
        return response

    def _process_successful_response(
        self,
        response: ApiResponse,
        accept_type: Union[MediaType, str],
        success_type: Any
    ) -> None:
        if not response.has_content:
            return

        try:
            response.success_response = deserialize_content(response.raw_content, accept_type, success_type)
        except Exception as e:
            logger.warning(f"Successful response could not be parsed: {str(e)}")
            response.is_ambiguous = True
            response.success_response = None
            response.error_message = f"Request is ambiguous, raw content: {response.raw_content}"

    def _process_failure_response(
        self,
        response: ApiResponse,
        accept_type: Union[MediaType, str],
        failure_type: Any
    ) -> None:
        try:
            response.failure_response = deserialize_content(response.raw_content, accept_type, failure_type)
        except Exception as e:
            logger.error(f"Failure response could not be parsed: {str(e)}")
            response.exception = e
            response.error_message = f"Failed to parse failure response: {str(e)}"

    def extract_error(self, response: ApiResponse) -> Dict[str, Any]:
        """
        Extract error information from a failed response

        Args:
            response: Failed ApiResponse

        Returns:
            Dict containing error details
        """
        error_data: Dict[str, Any] = {
            "status_code": response.status_code,
            "status": response.status_name,
            "message": response.error_message or "No message provided",
            "details": {}
        }

        if response.exception is not None:
            error_data["error"] = type(response.exception).__name__
        elif response.failure_response is not None:
            error_data["error"] = "Structured Failure"
            error_data["details"] = response.failure_response
        elif response.is_ambiguous:
            error_data["error"] = "Ambiguous Response"
            error_data["details"] = {"raw_content": response.raw_content}
        else:
            error_data["error"] = "Request Failed"

        return error_data
