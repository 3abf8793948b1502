import json
import pickle

import pytest

from mlrest.exceptions import (
    ENDPOINT_NOT_FOUND,
    INTERNAL_ERROR,
    INVALID_PARAMETER_VALUE,
    INVALID_STATE,
    IO_ERROR,
    RESOURCE_ALREADY_EXISTS,
    Conflict,
    DecodeError,
    InvalidArgument,
    MlrestException,
    NotFound,
    ServerError,
    TransportError,
    exception_class_for,
    rest_exception,
)


def test_error_code_constructor():
    assert (
        MlrestException("test", error_code=INVALID_PARAMETER_VALUE).error_code
        == "INVALID_PARAMETER_VALUE"
    )


def test_default_error_code():
    assert MlrestException("test").error_code == "INTERNAL_ERROR"
    assert NotFound("test").error_code == "RESOURCE_DOES_NOT_EXIST"
    assert TransportError("test").error_code == "IO_ERROR"


def test_serialize_to_json():
    mlrest_exception = MlrestException("test")
    deserialized = json.loads(mlrest_exception.serialize_as_json())
    assert deserialized["message"] == "test"
    assert deserialized["error_code"] == "INTERNAL_ERROR"


def test_get_http_status_code():
    assert MlrestException("test default").get_http_status_code() == 500
    assert MlrestException("code not in map", error_code=IO_ERROR).get_http_status_code() == 500
    assert MlrestException("test", error_code=INVALID_STATE).get_http_status_code() == 500
    assert MlrestException("test", error_code=ENDPOINT_NOT_FOUND).get_http_status_code() == 404
    assert MlrestException("test", error_code=INVALID_PARAMETER_VALUE).get_http_status_code() == 400
    assert MlrestException("test", error_code=INTERNAL_ERROR).get_http_status_code() == 500
    assert MlrestException("test", error_code=RESOURCE_ALREADY_EXISTS).get_http_status_code() == 400
    assert NotFound("test", http_status=410).get_http_status_code() == 410


def test_invalid_parameter_value():
    mlrest_exception = MlrestException.invalid_parameter_value("test")
    assert isinstance(mlrest_exception, InvalidArgument)
    assert mlrest_exception.error_code == "INVALID_PARAMETER_VALUE"


@pytest.mark.parametrize(
    "exc_class", [TransportError, ServerError, NotFound, Conflict, InvalidArgument, DecodeError]
)
def test_every_error_is_an_mlrest_exception(exc_class):
    assert issubclass(exc_class, MlrestException)


@pytest.mark.parametrize(
    ("error_code", "http_status", "expected"),
    [
        ("RESOURCE_DOES_NOT_EXIST", 404, NotFound),
        ("RESOURCE_DOES_NOT_EXIST", 400, NotFound),
        ("RESOURCE_ALREADY_EXISTS", 400, Conflict),
        ("INVALID_PARAMETER_VALUE", 400, InvalidArgument),
        ("PERMISSION_DENIED", 403, InvalidArgument),
        ("INTERNAL_ERROR", 500, ServerError),
        ("TEMPORARILY_UNAVAILABLE", 503, ServerError),
        (None, 404, NotFound),
        (None, 409, Conflict),
        (None, 401, InvalidArgument),
        (None, 429, InvalidArgument),
        (None, 502, ServerError),
        ("SOMETHING_NEW", 404, NotFound),
        ("SOMETHING_NEW", 500, ServerError),
    ],
)
def test_exception_class_for(error_code, http_status, expected):
    assert exception_class_for(error_code, http_status) is expected


def test_rest_exception():
    mlrest_exception = MlrestException("test", error_code=RESOURCE_ALREADY_EXISTS)
    json_exception = mlrest_exception.serialize_as_json()
    deserialized_rest_exception = rest_exception(json.loads(json_exception), 400)
    assert isinstance(deserialized_rest_exception, Conflict)
    assert deserialized_rest_exception.error_code == "RESOURCE_ALREADY_EXISTS"
    assert deserialized_rest_exception.http_status == 400
    assert deserialized_rest_exception.message == "RESOURCE_ALREADY_EXISTS: test"


def test_rest_exception_without_error_code_uses_http_status():
    exception = rest_exception({"message": "no such run"}, 404)
    assert isinstance(exception, NotFound)
    assert exception.error_code == "ENDPOINT_NOT_FOUND"
    assert exception.message == "ENDPOINT_NOT_FOUND: no such run"


def test_rest_exception_with_unrecognized_error_code():
    # Test that we can create a rest exception with a convertible error code.
    exception = rest_exception({"error_code": "403", "messages": "something important."}, 403)
    assert "something important." in str(exception)
    assert exception.error_code == "PERMISSION_DENIED"
    assert isinstance(exception, InvalidArgument)
    json.loads(exception.serialize_as_json())

    # Test that we can create a rest exception with an unrecognized error code.
    exception = rest_exception(
        {"error_code": "weird error", "messages": "something important."}, 502
    )
    assert "something important." in str(exception)
    assert exception.error_code == "weird error"
    assert isinstance(exception, ServerError)
    json.loads(exception.serialize_as_json())


def test_rest_exception_with_numeric_error_code():
    exception = rest_exception({"error_code": 404, "message": "gone"}, 404)
    assert isinstance(exception, NotFound)
    assert exception.error_code == "ENDPOINT_NOT_FOUND"


def test_rest_exception_pickleable():
    e1 = rest_exception({"error_code": "INTERNAL_ERROR", "message": "abc"}, 500)
    e2 = pickle.loads(pickle.dumps(e1))

    assert type(e1) is type(e2)
    assert e1.error_code == e2.error_code
    assert e1.message == e2.message
    assert e1.http_status == e2.http_status
