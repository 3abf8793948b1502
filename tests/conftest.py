import pytest
import requests

from mlrest.tracking.client import TrackingClient

from tests.fake_server import FakeMlflowServer
from tests.helper_functions import TRACKING_URI

_ENV_VARS = [
    "MLFLOW_TRACKING_URI",
    "MLFLOW_TRACKING_USERNAME",
    "MLFLOW_TRACKING_PASSWORD",
    "MLFLOW_TRACKING_TOKEN",
    "MLFLOW_TRACKING_INSECURE_TLS",
    "MLFLOW_TRACKING_SERVER_CERT_PATH",
    "MLFLOW_TRACKING_CLIENT_CERT_PATH",
    "MLFLOW_HTTP_REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_tracking_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_server(monkeypatch):
    server = FakeMlflowServer()
    session = requests.Session()
    session.mount("http://", server)
    session.mount("https://", server)
    monkeypatch.setattr("mlrest.utils.request_utils._get_request_session", lambda: session)
    return server


@pytest.fixture
def client(fake_server):
    return TrackingClient(TRACKING_URI)


@pytest.fixture
def experiment_id(client):
    return client.create_experiment("test-experiment").experiment_id


@pytest.fixture
def run_id(client, experiment_id):
    return client.create_run(experiment_id).info.run_id
