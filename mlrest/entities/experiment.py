from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.experiment_tag import ExperimentTag
from mlrest.utils.json_utils import parse_int64


class Experiment(_MlrestObject):
    """
    Experiment object.
    """

    DEFAULT_EXPERIMENT_NAME = "Default"

    def __init__(
        self,
        experiment_id,
        name,
        artifact_location,
        lifecycle_stage,
        tags=None,
        creation_time=None,
        last_update_time=None,
    ):
        super().__init__()
        self._experiment_id = experiment_id
        self._name = name
        self._artifact_location = artifact_location
        self._lifecycle_stage = lifecycle_stage
        if isinstance(tags, dict):
            self._tags = dict(tags)
        else:
            self._tags = {tag.key: tag.value for tag in (tags or [])}
        self._creation_time = creation_time
        self._last_update_time = last_update_time

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    @property
    def experiment_id(self):
        """String ID of the experiment."""
        return self._experiment_id

    @property
    def name(self):
        """String name of the experiment."""
        return self._name

    @property
    def artifact_location(self):
        """String corresponding to the root artifact URI for the experiment."""
        return self._artifact_location

    @property
    def lifecycle_stage(self):
        """Lifecycle stage of the experiment. Can either be 'active' or 'deleted'."""
        return self._lifecycle_stage

    @property
    def tags(self):
        """Tags that have been set on the experiment."""
        return self._tags

    def _add_tag(self, tag):
        self._tags[tag.key] = tag.value

    @property
    def creation_time(self):
        return self._creation_time

    @property
    def last_update_time(self):
        return self._last_update_time

    @classmethod
    def from_json_dict(cls, js_dict):
        experiment = cls(
            str(js_dict["experiment_id"]),
            js_dict["name"],
            js_dict.get("artifact_location", ""),
            js_dict.get("lifecycle_stage", "active"),
            # Servers older than MLflow 1.29.0 don't report these times; an absent or zero
            # value means unknown.
            creation_time=parse_int64(js_dict.get("creation_time")) or None,
            last_update_time=parse_int64(js_dict.get("last_update_time")) or None,
        )
        for js_tag in js_dict.get("tags", []):
            experiment._add_tag(ExperimentTag.from_json_dict(js_tag))
        return experiment

    def to_dictionary(self):
        experiment_dict = {
            "experiment_id": self.experiment_id,
            "name": self.name,
            "artifact_location": self.artifact_location,
            "lifecycle_stage": self.lifecycle_stage,
            "tags": [{"key": key, "value": value} for key, value in self.tags.items()],
        }
        if self.creation_time:
            experiment_dict["creation_time"] = self.creation_time
        if self.last_update_time:
            experiment_dict["last_update_time"] = self.last_update_time
        return experiment_dict
