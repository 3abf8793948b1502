"""
Client for the MLflow tracking REST API. :py:class:`TrackingClient` exposes every tracking
operation as a blocking method that sends exactly one HTTP request (``create_experiment`` and
``update_experiment`` compose several) and returns typed entities or raises one of the
exceptions of :py:mod:`mlrest.exceptions`.
"""

import contextlib
import getpass
import logging
from typing import Any, Optional, Sequence, Union

from mlrest.entities import (
    Experiment,
    ExperimentTag,
    LifecycleStage,
    Metric,
    Param,
    Run,
    RunInfo,
    RunStatus,
    RunTag,
    ViewType,
)
from mlrest.exceptions import Conflict, InvalidArgument, NotFound
from mlrest.store.entities.paged_list import PagedList
from mlrest.store.rest_store import RestStore
from mlrest.tracking.handles import ExperimentHandle, RunHandle
from mlrest.utils.credentials import get_default_host_creds, resolve_tracking_uri
from mlrest.utils.time import get_current_time_millis
from mlrest.utils.validation import (
    SEARCH_MAX_RESULTS_DEFAULT,
    _validate_batch_log_data,
    _validate_batch_log_limits,
    _validate_experiment_id,
    _validate_experiment_name,
    _validate_key,
    _validate_metric,
    _validate_order_by,
    _validate_run_id,
    _validate_search_max_results,
)

_logger = logging.getLogger(__name__)

_DEFAULT_USER = "unknown"
# Message of the INVALID_PARAMETER_VALUE error the server answers when a param is logged again
# with a different value.
_PARAM_VALUE_CHANGED_MESSAGE = "Changing param values is not allowed"


def _get_user():
    """Get the current computer username."""
    try:
        return getpass.getuser()
    except (ImportError, KeyError, OSError):
        return _DEFAULT_USER


@contextlib.contextmanager
def _param_changes_as_conflicts():
    """Raises the server's rejection of a changed param value as a :py:class:`Conflict`."""
    try:
        yield
    except InvalidArgument as e:
        if _PARAM_VALUE_CHANGED_MESSAGE in e.message:
            raise Conflict(e.message, error_code=e.error_code, http_status=e.http_status) from e
        raise


def _status_to_string(status):
    if isinstance(status, int) and not isinstance(status, bool):
        try:
            return RunStatus.to_string(status)
        except ValueError as e:
            raise InvalidArgument(str(e)) from e
    try:
        RunStatus.from_string(status)
    except ValueError as e:
        raise InvalidArgument(str(e)) from e
    return status


class TrackingClient:
    """
    Client of an MLflow tracking server. It creates and manages experiments and runs, and logs
    params, metrics and tags to runs, through the server's REST API.

    The client only holds immutable configuration: it is safe to share between threads, and
    nothing is cached, every call reaches the server.
    """

    def __init__(
        self,
        tracking_uri: Optional[str] = None,
        *,
        timeout: Optional[int] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ):
        """
        Args:
            tracking_uri: Address of the tracking server, e.g. ``http://localhost:5000``. If not
                provided, defaults to the ``MLFLOW_TRACKING_URI`` environment variable.
            timeout: Seconds to wait for the server to answer a request. If not provided,
                defaults to the ``MLFLOW_HTTP_REQUEST_TIMEOUT`` environment variable.
            extra_headers: HTTP headers sent with every request.
        """
        self._tracking_uri = resolve_tracking_uri(tracking_uri)
        # Credentials are read from the environment once, when the client is created.
        host_creds = get_default_host_creds(self._tracking_uri)
        self._store = RestStore(lambda: host_creds, extra_headers=extra_headers, timeout=timeout)

    @property
    def tracking_uri(self):
        return self._tracking_uri

    @property
    def store(self):
        return self._store

    # Handles

    def experiment(self, experiment_id: str) -> ExperimentHandle:
        """Returns an :py:class:`ExperimentHandle` bound to ``experiment_id``, without a request."""
        return ExperimentHandle(self, experiment_id)

    def run(self, run_id: str) -> RunHandle:
        """Returns a :py:class:`RunHandle` bound to ``run_id``. No request is sent."""
        return RunHandle(self, run_id)

    # Experiments

    def create_experiment(
        self,
        name: str,
        artifact_location: Optional[str] = None,
        tags: Optional[dict[str, Any]] = None,
    ) -> Experiment:
        """Create an experiment.

        Args:
            name: The experiment name. Must be unique.
            artifact_location: The location to store run artifacts. If not provided, the server
                picks an appropriate default.
            tags: A dictionary of key-value pairs that are converted into
                :py:class:`mlrest.entities.ExperimentTag` objects, set on the experiment upon
                experiment creation.

        Returns:
            The created :py:class:`mlrest.entities.Experiment`, as read back from the server.

        Raises:
            InvalidArgument: If ``name`` is empty or too long.
            Conflict: If an experiment with the same name already exists.
        """
        _validate_experiment_name(name)
        experiment_tags = [ExperimentTag(key, str(value)) for key, value in (tags or {}).items()]
        for tag in experiment_tags:
            _validate_key(tag.key, path="tags.key")
        experiment_id = self._store.create_experiment(
            name=name, artifact_location=artifact_location, tags=experiment_tags
        )
        _logger.debug(f"Created experiment '{name}' with ID {experiment_id}")
        return self._store.get_experiment(experiment_id)

    def get_experiment(self, experiment_id: str) -> Experiment:
        """Retrieve an experiment by experiment_id from the tracking server.

        Args:
            experiment_id: The experiment ID returned from ``create_experiment``.

        Returns:
            :py:class:`mlrest.entities.Experiment`

        Raises:
            NotFound: If no experiment has the given ID.
        """
        _validate_experiment_id(experiment_id)
        return self._store.get_experiment(experiment_id)

    def get_experiment_by_name(self, name: str) -> Optional[Experiment]:
        """Retrieve an experiment by experiment name from the tracking server.

        Args:
            name: The experiment name, which is case sensitive.

        Returns:
            An instance of :py:class:`mlrest.entities.Experiment`
            if an experiment with the specified name exists, otherwise None.
        """
        _validate_experiment_name(name)
        try:
            return self._store.get_experiment_by_name(name)
        except NotFound:
            return None

    def search_experiments(
        self,
        view_type: int = ViewType.ACTIVE_ONLY,
        max_results: Optional[int] = SEARCH_MAX_RESULTS_DEFAULT,
        filter_string: Optional[str] = None,
        order_by: Optional[list[str]] = None,
        page_token=None,
    ) -> PagedList[Experiment]:
        """
        Search for experiments that match the specified search query.

        Args:
            view_type: One of enum values ``ACTIVE_ONLY``, ``DELETED_ONLY``, or ``ALL``
                defined in :py:class:`mlrest.entities.ViewType`.
            max_results: Maximum number of experiments desired. Certain server backend may apply
                its own limit.
            filter_string: Filter query string (e.g., ``"name = 'my_experiment'"``), defaults to
                searching for all experiments.
            order_by: List of columns to order by, e.g. ``["name DESC"]``.
            page_token: Token specifying the next page of results. It should be obtained from
                a ``search_experiments`` call.

        Returns:
            A :py:class:`PagedList <mlrest.store.entities.PagedList>` of
            :py:class:`Experiment <mlrest.entities.Experiment>` objects. The pagination token
            for the next page can be obtained via the ``token`` attribute of the object.
        """
        _validate_search_max_results(max_results)
        _validate_order_by(order_by)
        return self._store.search_experiments(
            view_type=view_type,
            max_results=max_results,
            filter_string=filter_string,
            order_by=order_by,
            page_token=page_token,
        )

    def update_experiment(
        self,
        experiment_id: str,
        new_name: Optional[str] = None,
        new_stage: Optional[str] = None,
    ) -> None:
        """
        Update the name and/or lifecycle stage of an experiment. The server renames through
        ``experiments/update`` and moves between stages through ``experiments/delete`` and
        ``experiments/restore``. Only active experiments can be renamed, so when both fields are
        given a restore is sent before the rename and a delete after it.

        Args:
            experiment_id: The experiment ID returned from ``create_experiment``.
            new_name: The new name of the experiment.
            new_stage: ``"active"`` or ``"deleted"``.

        Raises:
            InvalidArgument: If neither field is given or ``new_stage`` is not a lifecycle stage.
            NotFound: If no experiment has the given ID.
            Conflict: If another experiment already has ``new_name``.
        """
        _validate_experiment_id(experiment_id)
        if new_name is None and new_stage is None:
            raise InvalidArgument(
                "At least one of 'new_name' and 'new_stage' must be provided to update "
                f"experiment {experiment_id}"
            )
        if new_stage is not None and not LifecycleStage.is_valid(new_stage):
            raise InvalidArgument(
                f"Invalid lifecycle stage {new_stage!r} for experiment {experiment_id}. "
                f"Expected one of {sorted(LifecycleStage._VALID_STAGES)}"
            )
        # A deleted experiment cannot be renamed: restore before renaming, rename before deleting.
        if new_stage == LifecycleStage.ACTIVE:
            self.restore_experiment(experiment_id)
        if new_name is not None:
            self.rename_experiment(experiment_id, new_name)
        if new_stage == LifecycleStage.DELETED:
            self.delete_experiment(experiment_id)

    def rename_experiment(self, experiment_id: str, new_name: str) -> None:
        """
        Update an experiment's name. The new name must be unique.

        Args:
            experiment_id: The experiment ID returned from ``create_experiment``.
            new_name: The new name of the experiment.
        """
        _validate_experiment_id(experiment_id)
        _validate_experiment_name(new_name)
        self._store.rename_experiment(experiment_id, new_name)

    def delete_experiment(self, experiment_id: str) -> None:
        """
        Delete an experiment from the tracking server. Its runs are deleted with it; a deleted
        experiment can be restored with ``restore_experiment``.
        """
        _validate_experiment_id(experiment_id)
        self._store.delete_experiment(experiment_id)

    def restore_experiment(self, experiment_id: str) -> None:
        """Restore a deleted experiment unless permanently deleted."""
        _validate_experiment_id(experiment_id)
        self._store.restore_experiment(experiment_id)

    def set_experiment_tag(self, experiment_id: str, key: str, value: Any) -> None:
        """
        Set a tag on the experiment with the specified ID. Value is converted to a string.

        Args:
            experiment_id: String ID of the experiment.
            key: Name of the tag.
            value: Tag value (converted to a string).
        """
        _validate_experiment_id(experiment_id)
        _validate_key(key)
        self._store.set_experiment_tag(experiment_id, ExperimentTag(key, str(value)))

    # Runs

    def create_run(
        self,
        experiment_id: str,
        start_time: Optional[int] = None,
        tags: Optional[dict[str, Any]] = None,
        run_name: Optional[str] = None,
    ) -> Run:
        """
        Create a :py:class:`mlrest.entities.Run` object that can be associated with
        metrics, parameters and tags. The run starts in the ``RUNNING`` status.

        Args:
            experiment_id: The string ID of the experiment to create a run in.
            start_time: If not provided, use the current timestamp.
            tags: A dictionary of key-value pairs that are converted into
                :py:class:`mlrest.entities.RunTag` objects.
            run_name: The name of this run. If not provided, the server generates one.

        Returns:
            :py:class:`mlrest.entities.Run` that was created.
        """
        _validate_experiment_id(experiment_id)
        run_tags = [RunTag(key, str(value)) for key, value in (tags or {}).items()]
        for tag in run_tags:
            _validate_key(tag.key, path="tags.key")
        return self._store.create_run(
            experiment_id=experiment_id,
            user_id=_get_user(),
            start_time=start_time if start_time is not None else get_current_time_millis(),
            tags=run_tags,
            run_name=run_name,
        )

    def get_run(self, run_id: str) -> Run:
        """
        Fetch the run from the tracking server. The resulting :py:class:`Run <mlrest.entities.Run>`
        contains a collection of run metadata, :py:class:`RunInfo <mlrest.entities.RunInfo>`,
        as well as a collection of run parameters, tags, and metrics,
        :py:class:`RunData <mlrest.entities.RunData>`. In the case where multiple metrics with
        the same key are logged for the run, the :py:class:`RunData <mlrest.entities.RunData>`
        contains the most recently logged value at the largest step for each metric.

        Args:
            run_id: Unique identifier for the run.

        Returns:
            A single :py:class:`mlrest.entities.Run` object, if the run exists. Otherwise,
            raises :py:class:`mlrest.exceptions.NotFound`.
        """
        _validate_run_id(run_id)
        return self._store.get_run(run_id)

    def update_run(
        self,
        run_id: str,
        status: Optional[str] = None,
        end_time: Optional[int] = None,
        run_name: Optional[str] = None,
    ) -> RunInfo:
        """
        Update a run's metadata. Only the fields that are given are sent to the server.

        Args:
            run_id: The ID of the run to update.
            status: The new status of the run, one of ``RUNNING``, ``SCHEDULED``, ``FINISHED``,
                ``FAILED`` or ``KILLED``.
            end_time: The end time of the run in milliseconds since the UNIX epoch.
            run_name: The new name of the run.

        Returns:
            The updated :py:class:`mlrest.entities.RunInfo`.
        """
        _validate_run_id(run_id)
        if status is not None:
            status = _status_to_string(status)
        return self._store.update_run_info(
            run_id, run_status=status, end_time=end_time, run_name=run_name
        )

    def terminate_run(
        self, run_id: str, status: str = "FINISHED", end_time: Optional[int] = None
    ) -> RunInfo:
        """Set a run's status to terminated.

        Args:
            run_id: The ID of the run to terminate.
            status: A string value of :py:class:`mlrest.entities.RunStatus`.
                Defaults to "FINISHED".
            end_time: If not provided, defaults to the current time.

        Returns:
            The updated :py:class:`mlrest.entities.RunInfo`.
        """
        end_time = end_time if end_time is not None else get_current_time_millis()
        run_info = self.update_run(run_id, status=status, end_time=end_time)
        _logger.info(f"Run {run_id} terminated with status {run_info.status}")
        return run_info

    def delete_run(self, run_id: str) -> None:
        """Deletes a run with the given ID."""
        _validate_run_id(run_id)
        self._store.delete_run(run_id)

    def restore_run(self, run_id: str) -> None:
        """Restores a deleted run with the given ID."""
        _validate_run_id(run_id)
        self._store.restore_run(run_id)

    def search_runs(
        self,
        experiment_ids: Union[str, Sequence[str]],
        filter_string: str = "",
        run_view_type: int = ViewType.ACTIVE_ONLY,
        max_results: int = SEARCH_MAX_RESULTS_DEFAULT,
        order_by: Optional[list[str]] = None,
        page_token: Optional[str] = None,
    ) -> PagedList[Run]:
        """
        Search for Runs that fit the specified criteria.

        Args:
            experiment_ids: List of experiment IDs, or a single int or string id.
            filter_string: Filter query string, defaults to searching all runs.
            run_view_type: one of enum values ACTIVE_ONLY, DELETED_ONLY, or ALL runs
                defined in :py:class:`mlrest.entities.ViewType`.
            max_results: Maximum number of runs desired.
            order_by: List of columns to order by (e.g., "metrics.rmse"). The ``order_by`` column
                can contain an optional ``DESC`` or ``ASC`` value. The default is ``ASC``.
                The default ordering is to sort by ``start_time DESC``, then ``run_id``.
            page_token: Token specifying the next page of results. It should be obtained from
                a ``search_runs`` call.

        Returns:
            A :py:class:`PagedList <mlrest.store.entities.PagedList>` of
            :py:class:`Run <mlrest.entities.Run>` objects that satisfy the search expressions,
            in the order returned by the server. If the underlying tracking store supports
            pagination, the token for the next page may be obtained via the ``token`` attribute
            of the returned object.

        Raises:
            InvalidArgument: If the server rejects ``filter_string``, or ``max_results`` or
                ``order_by`` are malformed.
        """
        _validate_search_max_results(max_results)
        _validate_order_by(order_by)
        return self._store.search_runs(
            experiment_ids=experiment_ids,
            filter_string=filter_string,
            run_view_type=run_view_type,
            max_results=max_results,
            order_by=order_by,
            page_token=page_token,
        )

    # Run data

    def log_param(self, run_id: str, key: str, value: Any) -> None:
        """
        Log a parameter (e.g. model hyperparameter) against the run ID. A parameter can be
        logged once per key; logging it again with the same value is a no-op.

        Args:
            run_id: String ID of the run.
            key: Parameter name.
            value: Parameter value, converted to a string.

        Raises:
            Conflict: If the key was already logged with a different value.
        """
        _validate_run_id(run_id)
        _validate_key(key)
        param = Param(key, str(value))
        with _param_changes_as_conflicts():
            self._store.log_param(run_id, param)

    def log_metric(
        self,
        run_id: str,
        key: str,
        value: float,
        timestamp: Optional[int] = None,
        step: Optional[int] = None,
    ) -> None:
        """
        Log a metric against the run ID. Every call appends a sample to the metric's history.

        Args:
            run_id: The run id to which the metric should be logged.
            key: Metric name.
            value: Metric value. Must be numeric; NaN and infinite values are accepted.
            timestamp: Time when this metric was calculated, in milliseconds since the UNIX
                epoch. Defaults to the current system time.
            step: Integer training step (iteration) at which was the metric calculated.
                Defaults to 0.
        """
        _validate_run_id(run_id)
        timestamp = timestamp if timestamp is not None else get_current_time_millis()
        step = step if step is not None else 0
        _validate_metric(key, value, timestamp, step)
        self._store.log_metric(run_id, Metric(key, float(value), timestamp, step))

    def log_batch(
        self,
        run_id: str,
        metrics: Sequence[Metric] = (),
        params: Sequence[Param] = (),
        tags: Sequence[RunTag] = (),
    ) -> None:
        """
        Log multiple metrics, params, and/or tags in a single request.

        Args:
            run_id: String ID of the run.
            metrics: If provided, List of Metric(key, value, timestamp, step) instances.
            params: If provided, List of Param(key, value) instances.
            tags: If provided, List of RunTag(key, value) instances.

        Raises:
            InvalidArgument: If the batch holds more than 1000 metrics, 100 params, 100 tags
                or 1000 entities in total, or holds an invalid entity. Nothing is sent.
            Conflict: If a param key was already logged with a different value.
        """
        _validate_run_id(run_id)
        metrics, params, tags = list(metrics), list(params), list(tags)
        if len(metrics) == 0 and len(params) == 0 and len(tags) == 0:
            return
        _validate_batch_log_limits(metrics, params, tags)
        _validate_batch_log_data(metrics, params, tags)
        params = [Param(param.key, str(param.value)) for param in params]
        tags = [RunTag(tag.key, str(tag.value)) for tag in tags]
        with _param_changes_as_conflicts():
            self._store.log_batch(run_id=run_id, metrics=metrics, params=params, tags=tags)

    def set_tag(self, run_id: str, key: str, value: Any) -> None:
        """
        Set a tag on the run with the specified ID. Value is converted to a string. Setting an
        existing key overwrites its value.

        Args:
            run_id: String ID of the run.
            key: Tag name.
            value: Tag value, converted to a string.
        """
        _validate_run_id(run_id)
        _validate_key(key)
        self._store.set_tag(run_id, RunTag(key, str(value)))

    def delete_tag(self, run_id: str, key: str) -> None:
        """Delete a tag from a run. This is irreversible."""
        _validate_run_id(run_id)
        _validate_key(key)
        self._store.delete_tag(run_id, key)

    def get_metric_history(self, run_id: str, key: str) -> list[Metric]:
        """Return a list of metric objects corresponding to all values logged for a given metric.

        Args:
            run_id: Unique identifier for run.
            key: Metric name within the run.

        Returns:
            A list of :py:class:`mlrest.entities.Metric` entities if logged, else empty list.
        """
        _validate_run_id(run_id)
        _validate_key(key)
        return self._store.get_metric_history(run_id=run_id, metric_key=key)
