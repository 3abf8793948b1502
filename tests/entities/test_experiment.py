from mlrest.entities import Experiment, ExperimentTag, LifecycleStage
from mlrest.utils.time import get_current_time_millis

from tests.helper_functions import random_int


def _check(exp, exp_id, name, location, lifecyle_stage, creation_time, last_update_time):
    assert isinstance(exp, Experiment)
    assert exp.experiment_id == exp_id
    assert exp.name == name
    assert exp.artifact_location == location
    assert exp.lifecycle_stage == lifecyle_stage
    assert exp.creation_time == creation_time
    assert exp.last_update_time == last_update_time


def test_creation_and_hydration():
    exp_id = str(random_int())
    name = f"exp_{random_int()}_{random_int()}"
    lifecycle_stage = LifecycleStage.ACTIVE
    location = f"mlflow-artifacts:/{exp_id}"
    creation_time = get_current_time_millis()
    last_update_time = get_current_time_millis()
    exp = Experiment(
        exp_id,
        name,
        location,
        lifecycle_stage,
        creation_time=creation_time,
        last_update_time=last_update_time,
    )
    _check(exp, exp_id, name, location, lifecycle_stage, creation_time, last_update_time)

    as_dict = {
        "experiment_id": exp_id,
        "name": name,
        "artifact_location": location,
        "lifecycle_stage": lifecycle_stage,
        "tags": {},
        "creation_time": creation_time,
        "last_update_time": last_update_time,
    }
    assert dict(exp) == as_dict

    exp2 = Experiment.from_json_dict(exp.to_dictionary())
    _check(exp2, exp_id, name, location, lifecycle_stage, creation_time, last_update_time)

    exp3 = Experiment.from_dictionary(as_dict)
    _check(exp3, exp_id, name, location, lifecycle_stage, creation_time, last_update_time)


def test_from_json_dict_with_string_times_and_tags():
    exp = Experiment.from_json_dict(
        {
            "experiment_id": "12",
            "name": "fraud",
            "artifact_location": "s3://bucket/12",
            "lifecycle_stage": "deleted",
            "creation_time": "1662004217511",
            "last_update_time": "1662004217999",
            "tags": [{"key": "team", "value": "risk"}, {"key": "empty"}],
        }
    )
    _check(exp, "12", "fraud", "s3://bucket/12", "deleted", 1662004217511, 1662004217999)
    assert exp.tags == {"team": "risk", "empty": ""}


def test_from_json_dict_treats_missing_times_as_unknown():
    exp = Experiment.from_json_dict({"experiment_id": 3, "name": "old", "creation_time": "0"})
    assert exp.experiment_id == "3"
    assert exp.creation_time is None
    assert exp.last_update_time is None
    assert exp.lifecycle_stage == LifecycleStage.ACTIVE
    assert exp.tags == {}


def test_tags_from_tag_objects():
    exp = Experiment("1", "a", "loc", LifecycleStage.ACTIVE, tags=[ExperimentTag("k", "v")])
    assert exp.tags == {"k": "v"}


def test_string_repr():
    exp = Experiment(
        experiment_id=0,
        name="myname",
        artifact_location="hi",
        lifecycle_stage=LifecycleStage.ACTIVE,
        creation_time=1662004217511,
        last_update_time=1662004217511,
    )
    assert (
        str(exp)
        == "<Experiment: artifact_location='hi', creation_time=1662004217511, experiment_id=0, "
        "last_update_time=1662004217511, lifecycle_stage='active', name='myname', tags={}>"
    )
