from mlrest.entities._mlrest_object import _MlrestObject


class BaseTag(_MlrestObject):
    """Base Tag object."""

    def __init__(self, key: str, value: str) -> None:
        self._key = key
        self._value = value

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __hash__(self):
        return hash((self._key, self._value))

    @property
    def key(self):
        """String name of the tag."""
        return self._key

    @property
    def value(self):
        """String value of the tag."""
        return self._value

    def to_json_dict(self):
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_json_dict(cls, js_dict):
        return cls(js_dict["key"], js_dict.get("value", ""))
