"""
The ``mlrest`` module provides a typed Python client of the MLflow tracking REST API.

- :py:class:`mlrest.TrackingClient` exposes experiment and run operations.
- :py:mod:`mlrest.entities` defines the values returned by the server.
- :py:mod:`mlrest.exceptions` defines the errors raised when a request fails.
"""

from mlrest.version import VERSION

__version__ = VERSION

from mlrest.environment_variables import MLREST_CONFIGURE_LOGGING
from mlrest.exceptions import (
    Conflict,
    DecodeError,
    InvalidArgument,
    MlrestException,
    NotFound,
    ServerError,
    TransportError,
)
from mlrest.tracking import BufferedRun, ExperimentHandle, RunHandle, TrackingClient
from mlrest.utils.logging_utils import _configure_mlrest_loggers

if MLREST_CONFIGURE_LOGGING.get() is True:
    _configure_mlrest_loggers(root_module_name=__name__)

__all__ = [
    "BufferedRun",
    "Conflict",
    "DecodeError",
    "ExperimentHandle",
    "InvalidArgument",
    "MlrestException",
    "NotFound",
    "RunHandle",
    "ServerError",
    "TrackingClient",
    "TransportError",
]
