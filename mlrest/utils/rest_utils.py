import base64
import json
import logging

import requests

from mlrest.environment_variables import MLFLOW_HTTP_REQUEST_TIMEOUT
from mlrest.exceptions import (
    DecodeError,
    InvalidArgument,
    TransportError,
    exception_class_for,
    get_error_code,
    rest_exception,
)
from mlrest.utils.request_utils import _get_http_response
from mlrest.utils.string_utils import strip_suffix
from mlrest.version import VERSION

_logger = logging.getLogger(__name__)

_REST_API_PATH_PREFIX = "/api/2.0"
_DEFAULT_HEADERS = {"User-Agent": f"mlrest/{VERSION}"}


def http_request(
    host_creds,
    endpoint,
    method,
    extra_headers=None,
    timeout=None,
    **kwargs,
):
    """Makes an HTTP request with the specified method to the specified hostname/endpoint.
    Exactly one request is sent: failures are never retried.

    Args:
        host_creds: A :py:class:`mlrest.utils.rest_utils.MlrestHostCreds` object containing
            hostname and optional authentication.
        endpoint: A string for service endpoint, e.g. "/path/to/object".
        method: A string indicating the method to use, e.g. "GET", "POST", "PUT".
        extra_headers: A dict of HTTP header name-value pairs to be included in the request.
        timeout: Wait for timeout seconds for response from remote server for connect and
            read request. Defaults to ``MLFLOW_HTTP_REQUEST_TIMEOUT``.
        kwargs: Additional keyword arguments to pass to `requests.Session.request()`

    Returns:
        requests.Response object.
    """
    cleaned_hostname = strip_suffix(host_creds.host, "/")
    url = f"{cleaned_hostname}{endpoint}"

    headers = dict(**_DEFAULT_HEADERS)
    if extra_headers:
        headers = dict(**headers, **extra_headers)

    timeout = MLFLOW_HTTP_REQUEST_TIMEOUT.get() if timeout is None else timeout
    auth_str = None
    if host_creds.username and host_creds.password:
        basic_auth_str = f"{host_creds.username}:{host_creds.password}".encode()
        auth_str = "Basic " + base64.standard_b64encode(basic_auth_str).decode("utf-8")
    elif host_creds.token:
        auth_str = f"Bearer {host_creds.token}"

    if auth_str:
        headers["Authorization"] = auth_str

    if host_creds.client_cert_path is not None:
        kwargs["cert"] = host_creds.client_cert_path

    _logger.debug(f"{method} {url}")
    try:
        return _get_http_response(
            method,
            url,
            headers=headers,
            verify=host_creds.verify,
            timeout=timeout,
            **kwargs,
        )
    except requests.exceptions.Timeout as to:
        raise TransportError(
            f"API request to {url} failed with timeout exception {to}."
            " To increase the timeout, set the environment variable "
            f"{MLFLOW_HTTP_REQUEST_TIMEOUT!s} to a larger value."
        ) from to
    except requests.exceptions.InvalidURL as iu:
        raise TransportError(f"Invalid url: {url}") from iu
    except requests.exceptions.RequestException as e:
        raise TransportError(f"API request to {url} failed with exception {e}") from e


def _can_parse_as_json_object(string):
    try:
        return isinstance(json.loads(string), dict)
    except Exception:
        return False


def verify_rest_response(response, endpoint):
    """Verify the return code and format, raise exception if the request was not successful."""
    status_code = response.status_code
    if 200 <= status_code < 300:
        # Void endpoints may answer with an empty body.
        if response.text.strip() == "":
            response._content = b"{}"
            return response
        if not _can_parse_as_json_object(response.text):
            raise DecodeError(
                "API request to endpoint was successful but the response body was not "
                f"in a valid JSON format. Response body: '{response.text}'",
                http_status=status_code,
            )
        return response

    _logger.debug(f"API request to {endpoint} failed with status {status_code}: {response.text}")
    if _can_parse_as_json_object(response.text):
        raise rest_exception(json.loads(response.text), status_code)

    error_code = get_error_code(status_code)
    base_msg = f"API request to endpoint {endpoint} failed with error code {status_code} != 200"
    raise exception_class_for(None, status_code)(
        f"{base_msg}. Response body: '{response.text}'",
        error_code=error_code,
        http_status=status_code,
    )


def call_endpoint(host_creds, endpoint, method, json_body, extra_headers=None, timeout=None):
    """
    Sends ``json_body`` to ``endpoint`` and returns the decoded JSON object of the response.
    GET requests carry the body as query parameters, every other method as a JSON body.
    """
    call_kwargs = {
        "host_creds": host_creds,
        "endpoint": endpoint,
        "method": method,
        "extra_headers": extra_headers,
        "timeout": timeout,
    }
    if method == "GET":
        call_kwargs["params"] = json_body
    else:
        call_kwargs["json"] = json_body
    response = http_request(**call_kwargs)

    response = verify_rest_response(response, endpoint)
    return json.loads(response.text)


class MlrestHostCreds:
    """
    Provides a hostname and optional authentication for talking to an MLflow tracking server.

    Args:
        host: Hostname (e.g., http://localhost:5000) to MLflow server. Required.
        username: Username to use with Basic authentication when talking to server.
            If this is specified, password must also be specified.
        password: Password to use with Basic authentication when talking to server.
            If this is specified, username must also be specified.
        token: Token to use with Bearer authentication when talking to server.
            If provided, user/password authentication will be ignored.
        ignore_tls_verification: If true, we will not verify the server's hostname or TLS
            certificate. This is useful for certain testing situations, but should never be
            true in production.
            If this is set to true ``server_cert_path`` must not be set.
        client_cert_path: Path to ssl client cert file (.pem).
            Sets the cert param of the ``requests.request``
            function (see https://requests.readthedocs.io/en/master/api/).
        server_cert_path: Path to a CA bundle to use.
            Sets the verify param of the ``requests.request``
            function (see https://requests.readthedocs.io/en/master/api/).
            If this is set ``ignore_tls_verification`` must be false.
    """

    def __init__(
        self,
        host,
        username=None,
        password=None,
        token=None,
        ignore_tls_verification=False,
        client_cert_path=None,
        server_cert_path=None,
    ):
        if not host:
            raise InvalidArgument("host is a required parameter for MlrestHostCreds")
        if ignore_tls_verification and (server_cert_path is not None):
            raise InvalidArgument(
                "When 'ignore_tls_verification' is true then 'server_cert_path' "
                "must not be set! This error may have occurred because the "
                "'MLFLOW_TRACKING_INSECURE_TLS' and 'MLFLOW_TRACKING_SERVER_CERT_PATH' "
                "environment variables are both set - only one of these environment "
                "variables may be set."
            )
        self.host = host
        self.username = username
        self.password = password
        self.token = token
        self.ignore_tls_verification = ignore_tls_verification
        self.client_cert_path = client_cert_path
        self.server_cert_path = server_cert_path

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        return NotImplemented

    def __hash__(self):
        return hash(frozenset(self.__dict__.items()))

    @property
    def verify(self):
        if self.server_cert_path is None:
            return not self.ignore_tls_verification
        else:
            return self.server_cert_path
