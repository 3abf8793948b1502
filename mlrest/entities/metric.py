from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.exceptions import InvalidArgument
from mlrest.utils.json_utils import parse_double, parse_int64


class Metric(_MlrestObject):
    """
    Metric object: one (value, timestamp, step) sample of the metric named ``key``.
    """

    def __init__(self, key, value, timestamp, step=0):
        self._key = key
        self._value = value
        self._timestamp = timestamp
        self._step = step

    @property
    def key(self):
        """String key corresponding to the metric name."""
        return self._key

    @property
    def value(self):
        """Float value of the metric."""
        return self._value

    @property
    def timestamp(self):
        """Metric timestamp as an integer (milliseconds since the Unix epoch)."""
        return self._timestamp

    @property
    def step(self):
        """Integer metric step (x-coordinate)."""
        return self._step

    def to_json_dict(self):
        return {
            "key": self.key,
            "value": self.value,
            "timestamp": self.timestamp,
            "step": self.step,
        }

    @classmethod
    def from_json_dict(cls, js_dict):
        return cls(
            js_dict["key"],
            parse_double(js_dict["value"]),
            parse_int64(js_dict.get("timestamp", 0)),
            parse_int64(js_dict.get("step", 0)),
        )

    def __eq__(self, __o):
        if isinstance(__o, self.__class__):
            return self.__dict__ == __o.__dict__

        return False

    def __hash__(self):
        return hash((self._key, self._value, self._timestamp, self._step))

    def to_dictionary(self):
        """
        Convert the Metric object to a dictionary.

        Returns:
            dict: The Metric object represented as a dictionary.
        """
        return self.to_json_dict()

    @classmethod
    def from_dictionary(cls, metric_dict):
        """
        Create a Metric object from a dictionary.

        Args:
            metric_dict (dict): Dictionary containing metric information.

        Returns:
            Metric: The Metric object created from the dictionary.
        """
        required_keys = ["key", "value", "timestamp", "step"]
        missing_keys = [key for key in required_keys if key not in metric_dict]
        if missing_keys:
            raise InvalidArgument(f"Missing required keys {missing_keys} in metric dictionary")

        return cls(**{key: metric_dict[key] for key in required_keys})
