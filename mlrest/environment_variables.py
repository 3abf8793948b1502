"""
This module defines environment variables used in mlrest.
The naming conventions are:
- Variables shared with the MLflow client keep their ``MLFLOW_`` names so that an environment
  configured for MLflow also configures mlrest.
- Variables specific to mlrest begin with ``MLREST_``.
"""

import os


class _EnvironmentVariable:
    """
    Represents an environment variable.
    """

    def __init__(self, name, type_, default):
        if type_ == bool and not isinstance(self, _BooleanEnvironmentVariable):
            raise ValueError("Use _BooleanEnvironmentVariable instead for boolean variables")
        self.name = name
        self.type = type_
        self.default = default

    @property
    def defined(self):
        return self.name in os.environ

    def get_raw(self):
        return os.getenv(self.name)

    def set(self, value):
        os.environ[self.name] = str(value)

    def unset(self):
        os.environ.pop(self.name, None)

    def get(self):
        """
        Reads the value of the environment variable if it exists and converts it to the desired
        type. Otherwise, returns the default value.
        """
        if (val := self.get_raw()) is not None:
            try:
                return self.type(val)
            except Exception as e:
                raise ValueError(f"Failed to convert {val!r} for {self.name}: {e}")
        return self.default

    def __str__(self):
        return f"{self.name} (default: {self.default})"

    def __repr__(self):
        return repr(self.name)

    def __format__(self, format_spec: str) -> str:
        return self.name.__format__(format_spec)


class _BooleanEnvironmentVariable(_EnvironmentVariable):
    """
    Represents a boolean environment variable.
    """

    def __init__(self, name, default):
        # `default not in [True, False, None]` doesn't work because `1 in [True]`
        # (or `0 in [False]`) returns True.
        if not (default is True or default is False or default is None):
            raise ValueError(f"{name} default value must be one of [True, False, None]")
        super().__init__(name, bool, default)

    def get(self):
        if not self.defined:
            return self.default

        val = os.getenv(self.name)
        lowercased = val.lower()
        if lowercased not in ["true", "false", "1", "0"]:
            raise ValueError(
                f"{self.name} value must be one of ['true', 'false', '1', '0'] (case-insensitive), "
                f"but got {val}"
            )
        return lowercased in ["true", "1"]


#: Specifies the tracking server URI, e.g. ``http://127.0.0.1:5000``.
#: (default: ``None``)
MLFLOW_TRACKING_URI = _EnvironmentVariable("MLFLOW_TRACKING_URI", str, None)

#: Specifies the username used for basic authentication with the tracking server.
#: (default: ``None``)
MLFLOW_TRACKING_USERNAME = _EnvironmentVariable("MLFLOW_TRACKING_USERNAME", str, None)

#: Specifies the password used for basic authentication with the tracking server.
#: (default: ``None``)
MLFLOW_TRACKING_PASSWORD = _EnvironmentVariable("MLFLOW_TRACKING_PASSWORD", str, None)

#: Specifies a bearer token used to authenticate with the tracking server. Takes precedence
#: over ``MLFLOW_TRACKING_USERNAME`` and ``MLFLOW_TRACKING_PASSWORD``.
#: (default: ``None``)
MLFLOW_TRACKING_TOKEN = _EnvironmentVariable("MLFLOW_TRACKING_TOKEN", str, None)

#: Specifies whether to skip TLS certificate verification when talking to the tracking server.
#: Must not be set together with ``MLFLOW_TRACKING_SERVER_CERT_PATH``.
#: (default: ``False``)
MLFLOW_TRACKING_INSECURE_TLS = _BooleanEnvironmentVariable("MLFLOW_TRACKING_INSECURE_TLS", False)

#: Sets the ``verify`` param in ``requests.request`` function,
#: see https://requests.readthedocs.io/en/master/api/
#: (default: ``None``)
MLFLOW_TRACKING_SERVER_CERT_PATH = _EnvironmentVariable(
    "MLFLOW_TRACKING_SERVER_CERT_PATH", str, None
)

#: Sets the ``cert`` param in ``requests.request`` function,
#: see https://requests.readthedocs.io/en/master/api/
#: (default: ``None``)
MLFLOW_TRACKING_CLIENT_CERT_PATH = _EnvironmentVariable(
    "MLFLOW_TRACKING_CLIENT_CERT_PATH", str, None
)

#: Specifies the timeout in seconds for HTTP requests to the tracking server
#: (default: ``120``)
MLFLOW_HTTP_REQUEST_TIMEOUT = _EnvironmentVariable("MLFLOW_HTTP_REQUEST_TIMEOUT", int, 120)

#: Specifies the number of connection pools to cache in the shared HTTP session.
#: (default: ``10``)
MLREST_HTTP_POOL_CONNECTIONS = _EnvironmentVariable("MLREST_HTTP_POOL_CONNECTIONS", int, 10)

#: Specifies the maximum number of connections kept in each pool of the shared HTTP session.
#: (default: ``10``)
MLREST_HTTP_POOL_MAXSIZE = _EnvironmentVariable("MLREST_HTTP_POOL_MAXSIZE", int, 10)

#: Specifies the level of the ``mlrest`` logger, e.g. ``DEBUG``.
#: (default: ``None``, which means ``INFO``)
MLREST_LOGGING_LEVEL = _EnvironmentVariable("MLREST_LOGGING_LEVEL", str, None)

#: Specifies whether importing mlrest configures the ``mlrest`` logger with a stderr handler.
#: (default: ``True``)
MLREST_CONFIGURE_LOGGING = _BooleanEnvironmentVariable("MLREST_CONFIGURE_LOGGING", True)
