from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.lifecycle_stage import LifecycleStage
from mlrest.entities.run_status import RunStatus
from mlrest.exceptions import InvalidArgument
from mlrest.utils.json_utils import parse_int64


class RunInfo(_MlrestObject):
    """
    Metadata about a run.
    """

    def __init__(
        self,
        run_uuid,
        experiment_id,
        user_id,
        status,
        start_time,
        end_time,
        lifecycle_stage,
        artifact_uri=None,
        run_id=None,
        run_name=None,
    ):
        if experiment_id is None:
            raise InvalidArgument("experiment_id cannot be None")
        if status is None:
            raise InvalidArgument("status cannot be None")
        actual_run_id = run_id or run_uuid
        if actual_run_id is None:
            raise InvalidArgument("run_id and run_uuid cannot both be None")
        self._run_uuid = actual_run_id
        self._run_id = actual_run_id
        self._experiment_id = experiment_id
        self._user_id = user_id
        self._status = status
        self._start_time = start_time
        self._end_time = end_time
        self._lifecycle_stage = lifecycle_stage
        self._artifact_uri = artifact_uri
        self._run_name = run_name

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    @property
    def run_uuid(self):
        """[Deprecated, use run_id instead] String containing run UUID."""
        return self._run_uuid

    @property
    def run_id(self):
        """String containing run id."""
        return self._run_id

    @property
    def experiment_id(self):
        """String ID of the experiment for the current run."""
        return self._experiment_id

    @property
    def run_name(self):
        """String containing run name."""
        return self._run_name

    @property
    def user_id(self):
        """String ID of the user who initiated this run."""
        return self._user_id

    @property
    def status(self):
        """
        One of the names in :py:class:`mlrest.entities.RunStatus`
        describing the status of the run, e.g. ``"RUNNING"``.
        """
        return self._status

    @property
    def start_time(self):
        """Start time of the run, in number of milliseconds since the UNIX epoch."""
        return self._start_time

    @property
    def end_time(self):
        """End time of the run, in number of milliseconds since the UNIX epoch."""
        return self._end_time

    @property
    def artifact_uri(self):
        """String root artifact URI of the run."""
        return self._artifact_uri

    @property
    def lifecycle_stage(self):
        return self._lifecycle_stage

    def is_terminated(self):
        return RunStatus.is_terminated(RunStatus.from_string(self.status))

    def to_dictionary(self):
        info_dict = {
            "run_id": self.run_id,
            "run_uuid": self.run_uuid,
            "run_name": self.run_name,
            "experiment_id": self.experiment_id,
            "user_id": self.user_id,
            "status": self.status,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "artifact_uri": self.artifact_uri,
            "lifecycle_stage": self.lifecycle_stage,
        }
        return {key: value for key, value in info_dict.items() if value is not None}

    @classmethod
    def from_json_dict(cls, js_dict):
        end_time = parse_int64(js_dict.get("end_time"))
        # An end time of zero or an absent field both mean the run has not ended.
        if end_time == 0:
            end_time = None
        status = js_dict.get("status", "RUNNING")
        # Validates the status name reported by the server.
        RunStatus.from_string(status)
        return cls(
            run_uuid=js_dict.get("run_uuid"),
            run_id=js_dict.get("run_id"),
            run_name=js_dict.get("run_name"),
            experiment_id=str(js_dict["experiment_id"]),
            user_id=js_dict.get("user_id", ""),
            status=status,
            start_time=parse_int64(js_dict.get("start_time")),
            end_time=end_time,
            lifecycle_stage=js_dict.get("lifecycle_stage", LifecycleStage.ACTIVE),
            artifact_uri=js_dict.get("artifact_uri"),
        )
