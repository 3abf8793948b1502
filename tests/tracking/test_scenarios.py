"""
End-to-end behaviour of the tracking client against the in-memory server: the guarantees
callers rely on when they record experiments and runs.
"""

import pytest

from mlrest.exceptions import Conflict, InvalidArgument, NotFound
from mlrest.utils.time import get_current_time_millis


@pytest.mark.parametrize(
    "name", ["exp1", "Fraud model (v2)", "a" * 500, "ünïcødé experiment", "with/slashes"]
)
def test_created_experiment_is_fetched_by_returned_id(client, name):
    created = client.create_experiment(name)
    fetched = client.get_experiment(created.experiment_id)
    assert fetched.name == name
    assert fetched.experiment_id == created.experiment_id
    assert client.get_experiment_by_name(name).experiment_id == created.experiment_id


def test_experiment_id_is_stable_across_updates(client, experiment_id):
    client.update_experiment(experiment_id, new_name="renamed")
    client.update_experiment(experiment_id, new_stage="deleted")
    client.update_experiment(experiment_id, new_stage="active")
    assert client.get_experiment(experiment_id).experiment_id == experiment_id
    assert client.get_experiment_by_name("renamed").experiment_id == experiment_id


@pytest.mark.parametrize(("key", "value"), [("constant", "42"), ("lr", 0.01), ("layers", 3)])
def test_logging_the_same_param_value_is_idempotent(client, run_id, key, value):
    client.log_param(run_id, key, value)
    client.log_param(run_id, key, value)
    assert client.get_run(run_id).data.params == {key: str(value)}


def test_logging_a_different_param_value_conflicts(client, run_id):
    client.log_param(run_id, "constant", "42")
    with pytest.raises(Conflict):
        client.log_param(run_id, "constant", "43")
    assert client.get_run(run_id).data.params == {"constant": "42"}


@pytest.mark.parametrize("step", [0, 7])
def test_metric_samples_are_appended_in_order(client, run_id, step):
    values = [0.5, 0.5, 0.25, 1.0, -3.0]
    for i, value in enumerate(values):
        client.log_metric(run_id, "rand", value, timestamp=1700000000000 + i, step=step)
        history = client.get_metric_history(run_id, "rand")
        assert len(history) == i + 1
    assert [m.value for m in history] == values
    assert [m.timestamp for m in history] == [1700000000000 + i for i in range(len(values))]
    assert {m.step for m in history} == {step}


def test_search_runs_is_scoped_to_the_experiment(client):
    first = client.create_experiment("first").experiment_id
    second = client.create_experiment("second").experiment_id
    first_runs = {client.create_run(first).info.run_id for _ in range(3)}
    second_runs = {client.create_run(second).info.run_id for _ in range(2)}

    found = client.search_runs([first])
    assert {r.info.run_id for r in found} == first_runs
    assert all(r.info.experiment_id == first for r in found)
    assert {r.info.run_id for r in client.search_runs(second)} == second_runs
    assert len(client.search_runs([first, second])) == 5


def test_search_runs_filter_and_order(client, experiment_id):
    for i in range(4):
        run_id = client.create_run(experiment_id, start_time=1000 + i).info.run_id
        client.log_param(run_id, "i", i)
        client.log_metric(run_id, "rand", i / 10, timestamp=1, step=0)

    runs = client.search_runs(
        [experiment_id], filter_string="metrics.rand >= 0.1", order_by=["metrics.rand DESC"]
    )
    assert [r.data.params["i"] for r in runs] == ["3", "2", "1"]

    default_order = client.search_runs([experiment_id])
    assert [r.info.start_time for r in default_order] == [1003, 1002, 1001, 1000]

    page = client.search_runs([experiment_id], max_results=3)
    assert len(page) == 3
    rest = client.search_runs([experiment_id], max_results=3, page_token=page.token)
    assert [r.info.start_time for r in rest] == [1000]
    assert rest.token is None


def test_search_runs_with_malformed_filter(client, experiment_id):
    with pytest.raises(InvalidArgument, match="Error on parsing filter"):
        client.search_runs([experiment_id], filter_string="metrics.rand >>> 1")


def test_demo_run_lifecycle(client):
    experiment = client.create_experiment("exp1")
    run = client.create_run(experiment.experiment_id)
    run_id = run.info.run_id
    client.log_param(run_id, "i", "0")
    client.log_metric(run_id, "rand", 0.42, get_current_time_millis(), 0)
    client.terminate_run(run_id)

    finished = client.get_run(run_id)
    assert finished.info.status == "FINISHED"
    assert finished.info.end_time is not None
    assert finished.info.end_time >= finished.info.start_time
    assert finished.info.experiment_id == experiment.experiment_id
    assert finished.data.params == {"i": "0"}
    assert finished.data.metrics == {"rand": 0.42}


def test_unknown_experiment_is_not_found(client):
    with pytest.raises(NotFound):
        client.get_experiment("123456")
