"""
Handles bind a :py:class:`mlrest.tracking.TrackingClient` to one experiment or run id, so that
code working on a single entity does not have to repeat the id on every call. They hold no other
state and forward every call to the client.
"""

from mlrest.entities import RunStatus, ViewType
from mlrest.utils.validation import SEARCH_MAX_RESULTS_DEFAULT


class ExperimentHandle:
    """A tracking client bound to one experiment."""

    def __init__(self, client, experiment_id):
        self._client = client
        self._experiment_id = str(experiment_id)

    @property
    def client(self):
        return self._client

    @property
    def experiment_id(self):
        return self._experiment_id

    def __repr__(self):
        return f"<ExperimentHandle: experiment_id={self._experiment_id!r}>"

    def get(self):
        return self._client.get_experiment(self._experiment_id)

    def update(self, new_name=None, new_stage=None):
        self._client.update_experiment(self._experiment_id, new_name=new_name, new_stage=new_stage)

    def rename(self, new_name):
        self._client.rename_experiment(self._experiment_id, new_name)

    def delete(self):
        self._client.delete_experiment(self._experiment_id)

    def restore(self):
        self._client.restore_experiment(self._experiment_id)

    def set_tag(self, key, value):
        self._client.set_experiment_tag(self._experiment_id, key, value)

    def create_run(self, start_time=None, tags=None, run_name=None):
        """
        Creates a run in this experiment.

        Returns:
            A :py:class:`RunHandle` bound to the new run.
        """
        run = self._client.create_run(
            self._experiment_id, start_time=start_time, tags=tags, run_name=run_name
        )
        return RunHandle(self._client, run.info.run_id)

    def search_runs(
        self,
        filter_string="",
        run_view_type=ViewType.ACTIVE_ONLY,
        max_results=SEARCH_MAX_RESULTS_DEFAULT,
        order_by=None,
        page_token=None,
    ):
        return self._client.search_runs(
            [self._experiment_id],
            filter_string=filter_string,
            run_view_type=run_view_type,
            max_results=max_results,
            order_by=order_by,
            page_token=page_token,
        )


class RunHandle:
    """
    A tracking client bound to one run. Can be used as a context manager: leaving the ``with``
    block terminates the run as ``FINISHED``, or as ``FAILED`` if the block raised.

    .. code-block:: python

        with client.experiment(experiment_id).create_run(run_name="train") as run:
            run.log_param("alpha", 0.5)
            run.log_metric("loss", 0.25, step=1)
    """

    def __init__(self, client, run_id):
        self._client = client
        self._run_id = run_id

    @property
    def client(self):
        return self._client

    @property
    def run_id(self):
        return self._run_id

    def __repr__(self):
        return f"<RunHandle: run_id={self._run_id!r}>"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        status = RunStatus.FINISHED if exc_type is None else RunStatus.FAILED
        self.terminate(status=RunStatus.to_string(status))
        return exc_type is None

    def get(self):
        return self._client.get_run(self._run_id)

    def update(self, status=None, end_time=None, run_name=None):
        return self._client.update_run(
            self._run_id, status=status, end_time=end_time, run_name=run_name
        )

    def terminate(self, status="FINISHED", end_time=None):
        return self._client.terminate_run(self._run_id, status=status, end_time=end_time)

    def delete(self):
        self._client.delete_run(self._run_id)

    def restore(self):
        self._client.restore_run(self._run_id)

    def log_param(self, key, value):
        self._client.log_param(self._run_id, key, value)

    def log_metric(self, key, value, timestamp=None, step=None):
        self._client.log_metric(self._run_id, key, value, timestamp=timestamp, step=step)

    def log_batch(self, metrics=(), params=(), tags=()):
        self._client.log_batch(self._run_id, metrics=metrics, params=params, tags=tags)

    def set_tag(self, key, value):
        self._client.set_tag(self._run_id, key, value)

    def delete_tag(self, key):
        self._client.delete_tag(self._run_id, key)

    def get_metric_history(self, key):
        return self._client.get_metric_history(self._run_id, key)
