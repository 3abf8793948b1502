from mlrest.environment_variables import (
    MLFLOW_TRACKING_CLIENT_CERT_PATH,
    MLFLOW_TRACKING_INSECURE_TLS,
    MLFLOW_TRACKING_PASSWORD,
    MLFLOW_TRACKING_SERVER_CERT_PATH,
    MLFLOW_TRACKING_TOKEN,
    MLFLOW_TRACKING_URI,
    MLFLOW_TRACKING_USERNAME,
)
from mlrest.exceptions import InvalidArgument
from mlrest.utils.rest_utils import MlrestHostCreds


def resolve_tracking_uri(tracking_uri=None):
    """
    Returns ``tracking_uri`` if given, otherwise the value of ``MLFLOW_TRACKING_URI``.
    """
    tracking_uri = tracking_uri or MLFLOW_TRACKING_URI.get()
    if not tracking_uri:
        raise InvalidArgument(
            "No tracking server URI was provided. Pass `tracking_uri` or set the "
            f"{MLFLOW_TRACKING_URI} environment variable, e.g. http://127.0.0.1:5000"
        )
    return tracking_uri


def get_default_host_creds(store_uri):
    return MlrestHostCreds(
        host=store_uri,
        username=MLFLOW_TRACKING_USERNAME.get(),
        password=MLFLOW_TRACKING_PASSWORD.get(),
        token=MLFLOW_TRACKING_TOKEN.get(),
        ignore_tls_verification=MLFLOW_TRACKING_INSECURE_TLS.get(),
        client_cert_path=MLFLOW_TRACKING_CLIENT_CERT_PATH.get(),
        server_cert_path=MLFLOW_TRACKING_SERVER_CERT_PATH.get(),
    )
