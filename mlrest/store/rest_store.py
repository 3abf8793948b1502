import logging

from mlrest.entities import Experiment, Metric, Run, RunInfo, ViewType
from mlrest.exceptions import DecodeError, InvalidArgument
from mlrest.store.entities.paged_list import PagedList
from mlrest.utils.json_utils import message_to_dict, stringify_experiment_ids
from mlrest.utils.rest_utils import _REST_API_PATH_PREFIX, call_endpoint

_logger = logging.getLogger(__name__)


def _get_path(endpoint_path):
    return f"{_REST_API_PATH_PREFIX}/mlflow{endpoint_path}"


# Maps each tracking service method to a tuple (path, HTTP method).
_METHOD_TO_INFO = {
    "CreateExperiment": (_get_path("/experiments/create"), "POST"),
    "GetExperiment": (_get_path("/experiments/get"), "GET"),
    "GetExperimentByName": (_get_path("/experiments/get-by-name"), "GET"),
    "SearchExperiments": (_get_path("/experiments/search"), "POST"),
    "UpdateExperiment": (_get_path("/experiments/update"), "POST"),
    "DeleteExperiment": (_get_path("/experiments/delete"), "POST"),
    "RestoreExperiment": (_get_path("/experiments/restore"), "POST"),
    "SetExperimentTag": (_get_path("/experiments/set-experiment-tag"), "POST"),
    "CreateRun": (_get_path("/runs/create"), "POST"),
    "GetRun": (_get_path("/runs/get"), "GET"),
    "UpdateRun": (_get_path("/runs/update"), "POST"),
    "DeleteRun": (_get_path("/runs/delete"), "POST"),
    "RestoreRun": (_get_path("/runs/restore"), "POST"),
    "SearchRuns": (_get_path("/runs/search"), "POST"),
    "LogParam": (_get_path("/runs/log-parameter"), "POST"),
    "LogMetric": (_get_path("/runs/log-metric"), "POST"),
    "LogBatch": (_get_path("/runs/log-batch"), "POST"),
    "SetTag": (_get_path("/runs/set-tag"), "POST"),
    "DeleteTag": (_get_path("/runs/delete-tag"), "POST"),
    "GetMetricHistory": (_get_path("/metrics/get-history"), "GET"),
}


class RestStore:
    """
    Client for a remote tracking server accessed via REST API calls.

    Args:
        get_host_creds: Method to be invoked prior to every REST request to get the
            :py:class:`mlrest.utils.rest_utils.MlrestHostCreds` for the request. Note that this
            is a function so that we can obtain fresh credentials in the case of expiry.
        extra_headers: A dict of HTTP headers sent with every request.
        timeout: Request timeout in seconds. Defaults to ``MLFLOW_HTTP_REQUEST_TIMEOUT``.
    """

    def __init__(self, get_host_creds, extra_headers=None, timeout=None):
        self.get_host_creds = get_host_creds
        self.extra_headers = dict(extra_headers or {})
        self.timeout = timeout

    def _call_endpoint(self, api, json_body=None):
        endpoint, method = _METHOD_TO_INFO[api]
        json_body = message_to_dict(json_body or {})
        return call_endpoint(
            self.get_host_creds(),
            endpoint,
            method,
            json_body,
            extra_headers=self.extra_headers,
            timeout=self.timeout,
        )

    @staticmethod
    def _decode(api, decoder, js_dict):
        """
        Applies ``decoder`` to the response ``js_dict`` of ``api``. A response that lacks a
        required field or holds a value of the wrong type raises a :py:class:`DecodeError`.
        """
        try:
            return decoder(js_dict)
        except (KeyError, TypeError, ValueError, InvalidArgument) as e:
            endpoint, _ = _METHOD_TO_INFO[api]
            _logger.debug(f"Failed to decode response of {endpoint}: {js_dict}")
            raise DecodeError(
                f"Response of endpoint {endpoint} does not match the expected schema: {e!r}. "
                f"Response body: {js_dict}"
            ) from e

    # Experiments

    def create_experiment(self, name, artifact_location=None, tags=None):
        """
        Create a new experiment.
        If an experiment with the given name already exists, throws exception.

        Args:
            name: Desired name for an experiment.
            artifact_location: Root artifact location of the experiment, chosen by the server
                when omitted.
            tags: A list of :py:class:`mlrest.entities.ExperimentTag` instances.

        Returns:
            The string ID of the newly created experiment.
        """
        req_body = {
            "name": name,
            "artifact_location": artifact_location,
            "tags": [tag.to_json_dict() for tag in tags or []],
        }
        js_dict = self._call_endpoint("CreateExperiment", req_body)
        return self._decode("CreateExperiment", lambda js: str(js["experiment_id"]), js_dict)

    def get_experiment(self, experiment_id):
        """
        Fetch the experiment from the backend store.

        Args:
            experiment_id: String id for the experiment.

        Returns:
            A single :py:class:`mlrest.entities.Experiment` object if it exists, otherwise
            raises :py:class:`mlrest.exceptions.NotFound`.
        """
        js_dict = self._call_endpoint("GetExperiment", {"experiment_id": str(experiment_id)})
        return self._decode(
            "GetExperiment", lambda js: Experiment.from_json_dict(js["experiment"]), js_dict
        )

    def get_experiment_by_name(self, experiment_name):
        js_dict = self._call_endpoint("GetExperimentByName", {"experiment_name": experiment_name})
        return self._decode(
            "GetExperimentByName", lambda js: Experiment.from_json_dict(js["experiment"]), js_dict
        )

    def search_experiments(
        self,
        view_type=ViewType.ACTIVE_ONLY,
        max_results=None,
        filter_string=None,
        order_by=None,
        page_token=None,
    ):
        req_body = {
            "view_type": ViewType.to_rest(view_type),
            "max_results": max_results,
            "filter": filter_string or None,
            "order_by": order_by,
            "page_token": page_token,
        }
        js_dict = self._call_endpoint("SearchExperiments", req_body)

        def _decoder(js):
            experiments = [Experiment.from_json_dict(e) for e in js.get("experiments", [])]
            return PagedList(experiments, js.get("next_page_token") or None)

        return self._decode("SearchExperiments", _decoder, js_dict)

    def rename_experiment(self, experiment_id, new_name):
        req_body = {"experiment_id": str(experiment_id), "new_name": new_name}
        self._call_endpoint("UpdateExperiment", req_body)

    def delete_experiment(self, experiment_id):
        self._call_endpoint("DeleteExperiment", {"experiment_id": str(experiment_id)})

    def restore_experiment(self, experiment_id):
        self._call_endpoint("RestoreExperiment", {"experiment_id": str(experiment_id)})

    def set_experiment_tag(self, experiment_id, tag):
        """
        Set a tag for the specified experiment

        Args:
            experiment_id: String id for the experiment.
            tag: :py:class:`mlrest.entities.ExperimentTag` instance to set.
        """
        req_body = {"experiment_id": str(experiment_id), "key": tag.key, "value": tag.value}
        self._call_endpoint("SetExperimentTag", req_body)

    # Runs

    def create_run(self, experiment_id, user_id, start_time, tags, run_name):
        """
        Create a run under the specified experiment ID, setting the run's status to "RUNNING".

        Args:
            experiment_id: String id of the experiment for this run.
            user_id: ID of the user launching this run.
            start_time: Start time of the run in milliseconds since the UNIX epoch.
            tags: A list of :py:class:`mlrest.entities.RunTag` instances.
            run_name: The name of this run, chosen by the server when omitted.

        Returns:
            The created :py:class:`mlrest.entities.Run` object.
        """
        req_body = {
            "experiment_id": str(experiment_id),
            "user_id": user_id,
            "start_time": start_time,
            "tags": [tag.to_json_dict() for tag in tags],
            "run_name": run_name,
        }
        js_dict = self._call_endpoint("CreateRun", req_body)
        return self._decode("CreateRun", lambda js: Run.from_json_dict(js["run"]), js_dict)

    def get_run(self, run_id):
        """
        Fetch the run from backend store

        Args:
            run_id: Unique identifier for the run.

        Returns:
            A single :py:class:`mlrest.entities.Run` object if it exists, otherwise raises
            :py:class:`mlrest.exceptions.NotFound`.
        """
        js_dict = self._call_endpoint("GetRun", {"run_id": run_id})
        return self._decode("GetRun", lambda js: Run.from_json_dict(js["run"]), js_dict)

    def update_run_info(self, run_id, run_status=None, end_time=None, run_name=None):
        """Updates the metadata of the specified run. Fields left as ``None`` are not sent."""
        req_body = {
            "run_id": run_id,
            "status": run_status,
            "end_time": end_time,
            "run_name": run_name,
        }
        js_dict = self._call_endpoint("UpdateRun", req_body)
        return self._decode(
            "UpdateRun", lambda js: RunInfo.from_json_dict(js["run_info"]), js_dict
        )

    def delete_run(self, run_id):
        self._call_endpoint("DeleteRun", {"run_id": run_id})

    def restore_run(self, run_id):
        self._call_endpoint("RestoreRun", {"run_id": run_id})

    def search_runs(
        self,
        experiment_ids,
        filter_string,
        run_view_type,
        max_results,
        order_by,
        page_token,
    ):
        """
        Return runs that match the given filter string within the experiments.

        Args:
            experiment_ids: List of experiment ids to scope the search.
            filter_string: Filter query string, defaults to searching all runs.
            run_view_type: One of :py:class:`mlrest.entities.ViewType`.
            max_results: Maximum number of runs desired.
            order_by: List of columns to order by.
            page_token: Token specifying the next page of results.

        Returns:
            A :py:class:`PagedList <mlrest.store.entities.PagedList>` of
            :py:class:`mlrest.entities.Run` objects, in the order returned by the server.
        """
        req_body = {
            "experiment_ids": stringify_experiment_ids(experiment_ids),
            "filter": filter_string or None,
            "run_view_type": ViewType.to_rest(run_view_type),
            "max_results": max_results,
            "order_by": order_by,
            "page_token": page_token,
        }
        js_dict = self._call_endpoint("SearchRuns", req_body)

        def _decoder(js):
            runs = [Run.from_json_dict(r) for r in js.get("runs", [])]
            return PagedList(runs, js.get("next_page_token") or None)

        return self._decode("SearchRuns", _decoder, js_dict)

    def log_param(self, run_id, param):
        """
        Log a param for the specified run

        Args:
            run_id: String id for the run.
            param: :py:class:`mlrest.entities.Param` instance to log.
        """
        req_body = {"run_id": run_id, "key": param.key, "value": param.value}
        self._call_endpoint("LogParam", req_body)

    def log_metric(self, run_id, metric):
        """
        Log a metric for the specified run

        Args:
            run_id: String id for the run.
            metric: :py:class:`mlrest.entities.Metric` instance to log.
        """
        req_body = {
            "run_id": run_id,
            "key": metric.key,
            "value": metric.value,
            "timestamp": metric.timestamp,
            "step": metric.step,
        }
        self._call_endpoint("LogMetric", req_body)

    def log_batch(self, run_id, metrics, params, tags):
        req_body = {
            "run_id": run_id,
            "metrics": [metric.to_json_dict() for metric in metrics],
            "params": [param.to_json_dict() for param in params],
            "tags": [tag.to_json_dict() for tag in tags],
        }
        self._call_endpoint("LogBatch", req_body)

    def set_tag(self, run_id, tag):
        """
        Set a tag for the specified run

        Args:
            run_id: String id for the run.
            tag: :py:class:`mlrest.entities.RunTag` instance to set.
        """
        req_body = {"run_id": run_id, "key": tag.key, "value": tag.value}
        self._call_endpoint("SetTag", req_body)

    def delete_tag(self, run_id, key):
        self._call_endpoint("DeleteTag", {"run_id": run_id, "key": key})

    def get_metric_history(self, run_id, metric_key):
        """
        Return all logged values for a given metric.

        Args:
            run_id: Unique identifier for run.
            metric_key: Metric name within the run.

        Returns:
            A list of :py:class:`mlrest.entities.Metric` objects in the order returned by the
            server, or an empty list if the metric was never logged.
        """
        req_body = {"run_id": run_id, "metric_key": metric_key}
        js_dict = self._call_endpoint("GetMetricHistory", req_body)
        return self._decode(
            "GetMetricHistory",
            lambda js: [Metric.from_json_dict(m) for m in js.get("metrics", [])],
            js_dict,
        )
