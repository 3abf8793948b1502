import logging

from mlrest.entities import Metric, Param, RunStatus, RunTag
from mlrest.exceptions import InvalidArgument
from mlrest.utils import chunk_list
from mlrest.utils.time import get_current_time_millis
from mlrest.utils.validation import (
    MAX_METRICS_PER_BATCH,
    MAX_PARAMS_TAGS_PER_BATCH,
    _validate_key,
    _validate_metric,
)

_logger = logging.getLogger(__name__)


class BufferedRun:
    """
    Collects the params, tags and metrics of a run locally and sends them in a few
    ``runs/log-batch`` requests when the run is submitted, instead of one request per value.

    .. code-block:: python

        run = BufferedRun()
        run.log_param("alpha", 0.5)
        for step, loss in enumerate(losses):
            run.log_metric("loss", loss, step=step)
        run.submit(client, experiment_id, run_name="train")

    Args:
        start_time: Start time of the run in milliseconds since the UNIX epoch. Defaults to the
            time the ``BufferedRun`` is created.
    """

    def __init__(self, start_time=None):
        self._start_time = start_time if start_time is not None else get_current_time_millis()
        self._params = []
        self._tags = []
        self._metrics = []

    @property
    def start_time(self):
        return self._start_time

    @property
    def params(self):
        return list(self._params)

    @property
    def tags(self):
        return list(self._tags)

    @property
    def metrics(self):
        return list(self._metrics)

    def log_param(self, key, value):
        # Params and tags are sent in a single request, so their count is bounded by its limit.
        if len(self._params) >= MAX_PARAMS_TAGS_PER_BATCH:
            raise InvalidArgument(
                f"A buffered run can hold at most {MAX_PARAMS_TAGS_PER_BATCH} params"
            )
        _validate_key(key)
        self._params.append(Param(key, str(value)))

    def set_tag(self, key, value):
        if len(self._tags) >= MAX_PARAMS_TAGS_PER_BATCH:
            raise InvalidArgument(
                f"A buffered run can hold at most {MAX_PARAMS_TAGS_PER_BATCH} tags"
            )
        _validate_key(key)
        self._tags.append(RunTag(key, str(value)))

    def log_metric(self, key, value, timestamp=None, step=None):
        timestamp = timestamp if timestamp is not None else get_current_time_millis()
        step = step if step is not None else 0
        _validate_metric(key, value, timestamp, step)
        self._metrics.append(Metric(key, float(value), timestamp, step))

    def submit(self, client, experiment_id, run_name=None):
        """
        Creates the run in ``experiment_id``, logs the buffered data and terminates the run as
        ``FINISHED``. If logging the buffered data fails, the run is terminated as ``FAILED``
        and the error is re-raised.

        Args:
            client: The :py:class:`mlrest.tracking.TrackingClient` to submit through.
            experiment_id: String ID of the experiment to create the run in.
            run_name: The name of the run. If not provided, the server generates one.

        Returns:
            The submitted :py:class:`mlrest.entities.Run`, as read back from the server.
        """
        run = client.create_run(experiment_id, start_time=self._start_time, run_name=run_name)
        run_id = run.info.run_id
        try:
            client.log_batch(run_id, params=self._params, tags=self._tags)
            for metrics in chunk_list(self._metrics, MAX_METRICS_PER_BATCH):
                client.log_batch(run_id, metrics=metrics)
        except Exception:
            _logger.debug(f"Logging the buffered data of run {run_id} failed, marking it FAILED")
            client.terminate_run(run_id, status=RunStatus.to_string(RunStatus.FAILED))
            raise
        client.terminate_run(run_id, status=RunStatus.to_string(RunStatus.FINISHED))
        _logger.debug(
            f"Submitted run {run_id} with {len(self._params)} params, {len(self._tags)} tags "
            f"and {len(self._metrics)} metrics"
        )
        return client.get_run(run_id)
