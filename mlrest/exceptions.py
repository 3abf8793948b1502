import json
import logging

# Error codes used by the MLflow REST API in the ``error_code`` field of error responses.
INTERNAL_ERROR = "INTERNAL_ERROR"
TEMPORARILY_UNAVAILABLE = "TEMPORARILY_UNAVAILABLE"
IO_ERROR = "IO_ERROR"
BAD_REQUEST = "BAD_REQUEST"
INVALID_STATE = "INVALID_STATE"
DATA_LOSS = "DATA_LOSS"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"
REQUEST_LIMIT_EXCEEDED = "REQUEST_LIMIT_EXCEEDED"
CANCELLED = "CANCELLED"
RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
ABORTED = "ABORTED"
NOT_FOUND = "NOT_FOUND"
ALREADY_EXISTS = "ALREADY_EXISTS"
PERMISSION_DENIED = "PERMISSION_DENIED"
UNAUTHENTICATED = "UNAUTHENTICATED"
CUSTOMER_UNAUTHORIZED = "CUSTOMER_UNAUTHORIZED"
ENDPOINT_NOT_FOUND = "ENDPOINT_NOT_FOUND"
INVALID_PARAMETER_VALUE = "INVALID_PARAMETER_VALUE"
RESOURCE_DOES_NOT_EXIST = "RESOURCE_DOES_NOT_EXIST"
RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
RESOURCE_CONFLICT = "RESOURCE_CONFLICT"

ERROR_CODE_TO_HTTP_STATUS = {
    INTERNAL_ERROR: 500,
    INVALID_STATE: 500,
    DATA_LOSS: 500,
    IO_ERROR: 500,
    NOT_IMPLEMENTED: 501,
    TEMPORARILY_UNAVAILABLE: 503,
    DEADLINE_EXCEEDED: 504,
    REQUEST_LIMIT_EXCEEDED: 429,
    CANCELLED: 499,
    RESOURCE_EXHAUSTED: 429,
    ABORTED: 409,
    RESOURCE_CONFLICT: 409,
    ALREADY_EXISTS: 409,
    NOT_FOUND: 404,
    ENDPOINT_NOT_FOUND: 404,
    RESOURCE_DOES_NOT_EXIST: 404,
    PERMISSION_DENIED: 403,
    CUSTOMER_UNAUTHORIZED: 401,
    UNAUTHENTICATED: 401,
    BAD_REQUEST: 400,
    RESOURCE_ALREADY_EXISTS: 400,
    INVALID_PARAMETER_VALUE: 400,
}

HTTP_STATUS_TO_ERROR_CODE = {v: k for k, v in ERROR_CODE_TO_HTTP_STATUS.items()}
HTTP_STATUS_TO_ERROR_CODE[400] = BAD_REQUEST
HTTP_STATUS_TO_ERROR_CODE[404] = ENDPOINT_NOT_FOUND
HTTP_STATUS_TO_ERROR_CODE[409] = RESOURCE_CONFLICT
HTTP_STATUS_TO_ERROR_CODE[429] = REQUEST_LIMIT_EXCEEDED
HTTP_STATUS_TO_ERROR_CODE[500] = INTERNAL_ERROR

_logger = logging.getLogger(__name__)


def get_error_code(http_status):
    return HTTP_STATUS_TO_ERROR_CODE.get(http_status, INTERNAL_ERROR)


class MlrestException(Exception):
    """
    Base class of every error raised by mlrest. Callers that need to branch on the kind of failure
    catch one of the concrete subclasses (:py:class:`NotFound`, :py:class:`Conflict`, ...);
    catching ``MlrestException`` handles all of them.
    """

    default_error_code = INTERNAL_ERROR

    def __init__(self, message, error_code=None, http_status=None, **kwargs):
        """
        Args:
            message: The message or exception describing the error that occurred. This will be
                included in the exception's serialized JSON representation.
            error_code: An MLflow error code string such as ``RESOURCE_DOES_NOT_EXIST``. Defaults
                to the error code associated with the exception class.
            http_status: The HTTP status code of the response that caused the error, or ``None``
                if the error was raised before or without receiving a response.
            kwargs: Additional key-value pairs to include in the serialized JSON representation
                of the exception.
        """
        message = str(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.http_status = http_status
        self.json_kwargs = kwargs
        super().__init__(message)

    def serialize_as_json(self):
        exception_dict = {"error_code": self.error_code, "message": self.message}
        exception_dict.update(self.json_kwargs)
        return json.dumps(exception_dict)

    def get_http_status_code(self):
        if self.http_status is not None:
            return self.http_status
        return ERROR_CODE_TO_HTTP_STATUS.get(self.error_code, 500)

    @classmethod
    def invalid_parameter_value(cls, message, **kwargs):
        """Constructs an :py:class:`InvalidArgument` with the `INVALID_PARAMETER_VALUE` error code.

        Args:
            message: The message describing the error that occurred. This will be included in the
                exception's serialized JSON representation.
            kwargs: Additional key-value pairs to include in the serialized JSON representation
                of the exception.
        """
        return InvalidArgument(message, error_code=INVALID_PARAMETER_VALUE, **kwargs)

    def __reduce__(self):
        return _rebuild_exception, (
            self.__class__,
            self.message,
            self.error_code,
            self.http_status,
            self.json_kwargs,
        )


def _rebuild_exception(cls, message, error_code, http_status, json_kwargs):
    return cls(message, error_code=error_code, http_status=http_status, **json_kwargs)


class TransportError(MlrestException):
    """The request never produced an HTTP response: connection, DNS, TLS or timeout failure."""

    default_error_code = IO_ERROR


class ServerError(MlrestException):
    """The tracking server answered with a 5xx status or an unrecognised error."""


class NotFound(MlrestException):
    """The requested experiment, run or endpoint does not exist."""

    default_error_code = RESOURCE_DOES_NOT_EXIST


class Conflict(MlrestException):
    """
    The request violates a uniqueness or immutability rule, e.g. an experiment name that is
    already taken or a parameter that was already logged with a different value.
    """

    default_error_code = RESOURCE_ALREADY_EXISTS


class InvalidArgument(MlrestException):
    """The request was rejected as malformed, unauthorized or otherwise invalid."""

    default_error_code = INVALID_PARAMETER_VALUE


class DecodeError(MlrestException):
    """A successful response body does not match the expected schema."""


_ERROR_CODE_TO_EXCEPTION = {
    RESOURCE_DOES_NOT_EXIST: NotFound,
    NOT_FOUND: NotFound,
    ENDPOINT_NOT_FOUND: NotFound,
    RESOURCE_ALREADY_EXISTS: Conflict,
    RESOURCE_CONFLICT: Conflict,
    ALREADY_EXISTS: Conflict,
    ABORTED: Conflict,
    INVALID_PARAMETER_VALUE: InvalidArgument,
    BAD_REQUEST: InvalidArgument,
    PERMISSION_DENIED: InvalidArgument,
    UNAUTHENTICATED: InvalidArgument,
    CUSTOMER_UNAUTHORIZED: InvalidArgument,
    REQUEST_LIMIT_EXCEEDED: InvalidArgument,
    INTERNAL_ERROR: ServerError,
    INVALID_STATE: ServerError,
    DATA_LOSS: ServerError,
    IO_ERROR: ServerError,
    NOT_IMPLEMENTED: ServerError,
    TEMPORARILY_UNAVAILABLE: ServerError,
    DEADLINE_EXCEEDED: ServerError,
    RESOURCE_EXHAUSTED: ServerError,
    CANCELLED: ServerError,
}


def exception_class_for(error_code, http_status):
    """
    Picks the exception class for a failed response. The error code reported by the server wins;
    the HTTP status is only consulted for codes the server did not send or that are unknown.
    """
    if error_code in _ERROR_CODE_TO_EXCEPTION:
        return _ERROR_CODE_TO_EXCEPTION[error_code]
    if http_status == 404:
        return NotFound
    if http_status == 409:
        return Conflict
    if http_status is not None and 400 <= http_status < 500:
        return InvalidArgument
    return ServerError


def rest_exception(json, http_status):
    """
    Builds the typed exception for a non-200 response whose body is the JSON object ``json``.
    """
    reported_code = json.get("error_code")
    if reported_code is not None and not isinstance(reported_code, str):
        reported_code = str(reported_code)
    if reported_code and reported_code.isdigit():
        # Proxies in front of the server sometimes report the HTTP status as the error code.
        reported_code = HTTP_STATUS_TO_ERROR_CODE.get(int(reported_code), INTERNAL_ERROR)
    elif reported_code and reported_code not in _ERROR_CODE_TO_EXCEPTION:
        _logger.warning(
            f"Received error code not recognized by mlrest: {reported_code}, this may "
            "indicate your request encountered an error before reaching the tracking server, "
            "e.g., within a proxy server or authentication / authorization service."
        )
    error_code = reported_code or get_error_code(http_status)
    message = "{}: {}".format(
        error_code,
        json["message"] if "message" in json else "Response: " + str(json),
    )
    exc_class = exception_class_for(reported_code, http_status)
    return exc_class(message, error_code=error_code, http_status=http_status)
