"""
Utilities for validating user inputs such as experiment names, metric values and batch sizes
before they are sent to the tracking server.
"""

import numbers

from mlrest.exceptions import InvalidArgument
from mlrest.utils.string_utils import is_string_type

MAX_PARAMS_TAGS_PER_BATCH = 100
MAX_METRICS_PER_BATCH = 1000
MAX_ENTITIES_PER_BATCH = 1000
MAX_EXPERIMENT_NAME_LENGTH = 500
MAX_ENTITY_KEY_LENGTH = 250
SEARCH_MAX_RESULTS_DEFAULT = 1000
SEARCH_MAX_RESULTS_THRESHOLD = 50000

_MISSING_KEY_NAME_MESSAGE = "A key name must be provided."


def exceeds_maximum_length(path, limit):
    return f"'{path}' exceeds the maximum length of {limit} characters"


def _is_numeric(value):
    """
    Returns True if the passed-in value is numeric.
    """
    # Note that `isinstance(bool_value, numbers.Number)` returns `True` because `bool` is a
    # subclass of `int`.
    return not isinstance(value, bool) and isinstance(value, numbers.Number)


def _is_integer(value):
    return not isinstance(value, bool) and isinstance(value, numbers.Integral)


def _validate_metric(key, value, timestamp, step, path=""):
    """
    Check that a metric with the specified key, value, timestamp, and step is valid and raise an
    exception if it isn't.
    """
    _validate_key(key, path=f"{path}key" if path else "key")
    if not _is_numeric(value):
        raise InvalidArgument(
            f"Got invalid value {value!r} for metric '{key}' (timestamp={timestamp}). "
            "Please specify value as a valid double (64-bit floating point)",
        )

    if not _is_integer(timestamp):
        raise InvalidArgument(
            f"Got invalid timestamp {timestamp!r} for metric '{key}' (value={value}). "
            "Timestamp must be an integer number of milliseconds since the UNIX epoch.",
        )

    if not _is_integer(step):
        raise InvalidArgument(
            f"Got invalid step {step!r} for metric '{key}' (value={value}). "
            "Step must be a valid 64-bit integer value.",
        )


def _validate_key(key, path="key"):
    if key is None or key == "":
        raise InvalidArgument(f"{_MISSING_KEY_NAME_MESSAGE} Got {path}={key!r}")
    if not is_string_type(key):
        raise InvalidArgument(f"Invalid {path}: {key!r}. Expects a string.")
    if len(key) > MAX_ENTITY_KEY_LENGTH:
        raise InvalidArgument(exceeds_maximum_length(path, MAX_ENTITY_KEY_LENGTH))


def _validate_experiment_name(experiment_name):
    """Check that `experiment_name` is a valid string and raise an exception if it isn't."""
    if experiment_name == "" or experiment_name is None:
        raise InvalidArgument(f"Invalid experiment name: '{experiment_name}'")

    if not is_string_type(experiment_name):
        raise InvalidArgument(f"Invalid experiment name: {experiment_name}. Expects a string.")

    if len(experiment_name) > MAX_EXPERIMENT_NAME_LENGTH:
        raise InvalidArgument(exceeds_maximum_length("name", MAX_EXPERIMENT_NAME_LENGTH))


def _validate_experiment_id(experiment_id):
    if experiment_id is None or str(experiment_id) == "":
        raise InvalidArgument(f"Invalid experiment ID: {experiment_id!r}")


def _validate_run_id(run_id):
    if not run_id or not is_string_type(run_id):
        raise InvalidArgument(f"Invalid run ID: {run_id!r}")


def _validate_batch_limit(entity_name, limit, length):
    if length > limit:
        error_msg = (
            f"A batch logging request can contain at most {limit} {entity_name}. "
            f"Got {length} {entity_name}. Please split up {entity_name} across multiple"
            " requests and try again."
        )
        raise InvalidArgument(error_msg)


def _validate_batch_log_limits(metrics, params, tags):
    """Validate that the provided batched logging arguments are within expected limits."""
    _validate_batch_limit(entity_name="metrics", limit=MAX_METRICS_PER_BATCH, length=len(metrics))
    _validate_batch_limit(entity_name="params", limit=MAX_PARAMS_TAGS_PER_BATCH, length=len(params))
    _validate_batch_limit(entity_name="tags", limit=MAX_PARAMS_TAGS_PER_BATCH, length=len(tags))
    total_length = len(metrics) + len(params) + len(tags)
    _validate_batch_limit(
        entity_name="metrics, params, and tags",
        limit=MAX_ENTITIES_PER_BATCH,
        length=total_length,
    )


def _validate_batch_log_data(metrics, params, tags):
    for index, metric in enumerate(metrics):
        path = f"metrics[{index}]."
        _validate_metric(metric.key, metric.value, metric.timestamp, metric.step, path=path)
    for index, param in enumerate(params):
        _validate_key(param.key, path=f"params[{index}].key")
    for index, tag in enumerate(tags):
        _validate_key(tag.key, path=f"tags[{index}].key")


def _validate_search_max_results(max_results):
    if max_results is None:
        return
    if not _is_integer(max_results) or max_results <= 0:
        raise InvalidArgument(
            f"Invalid value {max_results!r} for parameter 'max_results' supplied. It must be "
            "a positive integer"
        )
    if max_results > SEARCH_MAX_RESULTS_THRESHOLD:
        raise InvalidArgument(
            f"Invalid value {max_results} for parameter 'max_results' supplied. It must be at "
            f"most {SEARCH_MAX_RESULTS_THRESHOLD}"
        )


def _validate_order_by(order_by):
    if order_by is None:
        return
    if is_string_type(order_by) or not all(is_string_type(clause) for clause in order_by):
        raise InvalidArgument(
            f"Invalid value {order_by!r} for parameter 'order_by'. It must be a list of strings "
            "such as ['metrics.rmse ASC', 'attributes.start_time DESC']"
        )
