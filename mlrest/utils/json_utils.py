"""
Helpers mapping between Python values and the JSON encoding used by the MLflow REST API.

The server serializes its messages with the proto3 JSON mapping, which renders int64 fields
(timestamps, steps) as JSON strings and omits unset fields. Requests are accepted with int64
fields as numbers or strings.
"""

import math


def message_to_dict(message):
    """
    Returns a copy of the request ``message`` without ``None`` values, recursing into nested
    dictionaries and lists, so that unset optional fields are omitted from the request.
    Non-finite doubles are rendered as ``"NaN"``, ``"Infinity"`` or ``"-Infinity"``, which plain
    JSON cannot represent.
    """
    if isinstance(message, float) and not math.isfinite(message):
        if math.isnan(message):
            return "NaN"
        return "Infinity" if message > 0 else "-Infinity"
    if isinstance(message, dict):
        return {key: message_to_dict(value) for key, value in message.items() if value is not None}
    if isinstance(message, (list, tuple)):
        return [message_to_dict(value) for value in message if value is not None]
    return message


def parse_int64(value):
    """
    Converts an int64 field of a response to ``int``. Accepts JSON numbers and the string form
    produced by the proto3 JSON mapping. ``None`` is returned unchanged.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"Expected an integer, got {value!r}")


def parse_double(value):
    """
    Converts a double field of a response to ``float``. The proto3 JSON mapping renders
    non-finite values as the strings ``"NaN"``, ``"Infinity"`` and ``"-Infinity"``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value)
    raise ValueError(f"Expected a number, got {value!r}")


def stringify_experiment_ids(experiment_ids):
    """Experiment ids are strings on the wire; integer ids are accepted for convenience."""
    if isinstance(experiment_ids, (str, int)):
        experiment_ids = [experiment_ids]
    return [str(experiment_id) for experiment_id in experiment_ids]
