from unittest import mock

import pytest

from mlrest.entities import Metric, Param, RunTag
from mlrest.exceptions import InvalidArgument, ServerError
from mlrest.tracking import BufferedRun


def test_buffered_run_records_locally(fake_server):
    run = BufferedRun(start_time=1700000000000)
    run.log_param("alpha", 0.5)
    run.set_tag("team", "risk")
    run.log_metric("loss", 1, timestamp=10, step=2)
    assert run.start_time == 1700000000000
    assert run.params == [Param("alpha", "0.5")]
    assert run.tags == [RunTag("team", "risk")]
    assert run.metrics == [Metric("loss", 1.0, 10, 2)]
    assert fake_server.requests == []


def test_buffered_run_defaults():
    with mock.patch("mlrest.tracking.buffered_run.get_current_time_millis", return_value=99):
        run = BufferedRun()
        run.log_metric("loss", 0.5)
    assert run.start_time == 99
    assert run.metrics == [Metric("loss", 0.5, 99, 0)]


def test_buffered_run_limits():
    run = BufferedRun()
    for i in range(100):
        run.log_param(f"p{i}", i)
        run.set_tag(f"t{i}", i)
    with pytest.raises(InvalidArgument, match="at most 100 params"):
        run.log_param("p100", 100)
    with pytest.raises(InvalidArgument, match="at most 100 tags"):
        run.set_tag("t100", 100)
    assert len(run.params) == 100
    assert len(run.tags) == 100


def test_buffered_run_validates_entries():
    run = BufferedRun()
    with pytest.raises(InvalidArgument, match="A key name must be provided"):
        run.log_param("", 1)
    with pytest.raises(InvalidArgument, match="Got invalid value"):
        run.log_metric("loss", "high")


def test_submit(client, experiment_id, fake_server):
    run = BufferedRun(start_time=1700000000000)
    run.log_param("alpha", 0.5)
    run.set_tag("team", "risk")
    for step in range(2500):
        run.log_metric("loss", 1 / (step + 1), timestamp=1700000000000 + step, step=step)
    fake_server.requests.clear()

    submitted = run.submit(client, experiment_id, run_name="buffered")

    assert fake_server.endpoints() == [
        "/runs/create",
        "/runs/log-batch",
        "/runs/log-batch",
        "/runs/log-batch",
        "/runs/log-batch",
        "/runs/update",
        "/runs/get",
    ]
    batches = [body for _, endpoint, body in fake_server.requests if endpoint == "/runs/log-batch"]
    assert batches[0]["params"] == [{"key": "alpha", "value": "0.5"}]
    assert batches[0]["tags"] == [{"key": "team", "value": "risk"}]
    assert [len(b.get("metrics", [])) for b in batches] == [0, 1000, 1000, 500]
    assert submitted.info.status == "FINISHED"
    assert submitted.info.start_time == 1700000000000
    assert submitted.info.run_name == "buffered"
    assert submitted.data.params == {"alpha": "0.5"}
    assert submitted.data.metrics == {"loss": 1 / 2500}
    history = client.get_metric_history(submitted.info.run_id, "loss")
    assert [m.step for m in history] == list(range(2500))


def test_submit_empty_run(client, experiment_id, fake_server):
    fake_server.requests.clear()
    submitted = BufferedRun().submit(client, experiment_id)
    assert fake_server.endpoints() == ["/runs/create", "/runs/update", "/runs/get"]
    assert submitted.info.status == "FINISHED"


def test_submit_marks_run_failed_when_logging_fails(client, experiment_id, fake_server):
    run = BufferedRun()
    run.log_param("alpha", 0.5)
    fake_server.requests.clear()
    with mock.patch.object(
        client.store, "log_batch", side_effect=ServerError("INTERNAL_ERROR: boom", http_status=500)
    ):
        with pytest.raises(ServerError, match="boom"):
            run.submit(client, experiment_id)
    assert fake_server.endpoints() == ["/runs/create", "/runs/update"]
    assert fake_server.requests[-1][2]["status"] == "FAILED"
    assert [r.info.status for r in client.search_runs([experiment_id])] == ["FAILED"]
