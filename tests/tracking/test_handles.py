from unittest import mock

import pytest

from mlrest.entities import LifecycleStage, Metric, ViewType
from mlrest.tracking import ExperimentHandle, RunHandle, TrackingClient


@pytest.fixture
def mock_client():
    return mock.create_autospec(TrackingClient, instance=True)


@pytest.mark.parametrize(
    ("call", "client_method", "args", "kwargs"),
    [
        (lambda h: h.get(), "get_experiment", ("7",), {}),
        (
            lambda h: h.update(new_name="n"),
            "update_experiment",
            ("7",),
            {"new_name": "n", "new_stage": None},
        ),
        (lambda h: h.rename("n"), "rename_experiment", ("7", "n"), {}),
        (lambda h: h.delete(), "delete_experiment", ("7",), {}),
        (lambda h: h.restore(), "restore_experiment", ("7",), {}),
        (lambda h: h.set_tag("k", "v"), "set_experiment_tag", ("7", "k", "v"), {}),
        (
            lambda h: h.search_runs("params.a = '1'", max_results=5),
            "search_runs",
            (["7"],),
            {
                "filter_string": "params.a = '1'",
                "run_view_type": ViewType.ACTIVE_ONLY,
                "max_results": 5,
                "order_by": None,
                "page_token": None,
            },
        ),
    ],
)
def test_experiment_handle_forwards_to_client(mock_client, call, client_method, args, kwargs):
    handle = ExperimentHandle(mock_client, 7)
    call(handle)
    getattr(mock_client, client_method).assert_called_once_with(*args, **kwargs)


def test_experiment_handle_create_run(mock_client):
    mock_client.create_run.return_value.info.run_id = "abc"
    run = ExperimentHandle(mock_client, "7").create_run(start_time=5, run_name="train")
    mock_client.create_run.assert_called_once_with(
        "7", start_time=5, tags=None, run_name="train"
    )
    assert isinstance(run, RunHandle)
    assert run.run_id == "abc"
    assert run.client is mock_client


@pytest.mark.parametrize(
    ("call", "client_method", "args", "kwargs"),
    [
        (lambda h: h.get(), "get_run", ("abc",), {}),
        (
            lambda h: h.update(status="KILLED"),
            "update_run",
            ("abc",),
            {"status": "KILLED", "end_time": None, "run_name": None},
        ),
        (
            lambda h: h.terminate(),
            "terminate_run",
            ("abc",),
            {"status": "FINISHED", "end_time": None},
        ),
        (lambda h: h.delete(), "delete_run", ("abc",), {}),
        (lambda h: h.restore(), "restore_run", ("abc",), {}),
        (lambda h: h.log_param("k", 1), "log_param", ("abc", "k", 1), {}),
        (
            lambda h: h.log_metric("m", 0.5, step=3),
            "log_metric",
            ("abc", "m", 0.5),
            {"timestamp": None, "step": 3},
        ),
        (
            lambda h: h.log_batch(metrics=[Metric("m", 1.0, 0, 0)]),
            "log_batch",
            ("abc",),
            {"metrics": [Metric("m", 1.0, 0, 0)], "params": (), "tags": ()},
        ),
        (lambda h: h.set_tag("k", "v"), "set_tag", ("abc", "k", "v"), {}),
        (lambda h: h.delete_tag("k"), "delete_tag", ("abc", "k"), {}),
        (lambda h: h.get_metric_history("m"), "get_metric_history", ("abc", "m"), {}),
    ],
)
def test_run_handle_forwards_to_client(mock_client, call, client_method, args, kwargs):
    handle = RunHandle(mock_client, "abc")
    call(handle)
    getattr(mock_client, client_method).assert_called_once_with(*args, **kwargs)


def test_handle_repr():
    assert repr(ExperimentHandle(None, 3)) == "<ExperimentHandle: experiment_id='3'>"
    assert repr(RunHandle(None, "abc")) == "<RunHandle: run_id='abc'>"


def test_run_handle_context_manager_finishes_run(client, experiment_id):
    with client.experiment(experiment_id).create_run(run_name="train") as run:
        run.log_param("alpha", 0.5)
        run.log_metric("loss", 0.25, step=1)
        assert run.get().info.status == "RUNNING"

    finished = run.get()
    assert finished.info.status == "FINISHED"
    assert finished.info.end_time is not None
    assert finished.info.run_name == "train"
    assert finished.data.params == {"alpha": "0.5"}
    assert finished.data.metrics == {"loss": 0.25}


def test_run_handle_context_manager_fails_run_and_propagates(client, experiment_id):
    with pytest.raises(ZeroDivisionError):
        with client.experiment(experiment_id).create_run() as run:
            1 / 0
    assert run.get().info.status == "FAILED"


def test_experiment_handle_against_server(client, experiment_id):
    experiment = client.experiment(experiment_id)
    experiment.set_tag("team", "risk")
    experiment.rename("renamed")
    assert experiment.get().name == "renamed"
    assert experiment.get().tags == {"team": "risk"}
    run = experiment.create_run()
    assert [r.info.run_id for r in experiment.search_runs()] == [run.run_id]
    experiment.update(new_stage="deleted")
    assert experiment.get().lifecycle_stage == LifecycleStage.DELETED
    experiment.restore()
    assert experiment.get().lifecycle_stage == LifecycleStage.ACTIVE
