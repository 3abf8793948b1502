"""
The ``mlrest.tracking`` module provides the typed client of the MLflow tracking REST API, the
experiment and run handles bound to it, and the buffered run that submits its data in batches.
"""

from mlrest.tracking.buffered_run import BufferedRun
from mlrest.tracking.client import TrackingClient
from mlrest.tracking.handles import ExperimentHandle, RunHandle

__all__ = [
    "BufferedRun",
    "ExperimentHandle",
    "RunHandle",
    "TrackingClient",
]
