from mlrest.entities._mlrest_object import _MlrestObject


class Param(_MlrestObject):
    """
    Parameter object.
    """

    def __init__(self, key, value):
        self._key = key
        self._value = value

    @property
    def key(self):
        """String key corresponding to the parameter name."""
        return self._key

    @property
    def value(self):
        """String value of the parameter."""
        return self._value

    def to_json_dict(self):
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_json_dict(cls, js_dict):
        return cls(js_dict["key"], js_dict.get("value", ""))

    def __eq__(self, __o):
        if isinstance(__o, self.__class__):
            return self._key == __o._key and self._value == __o._value

        return False

    def __hash__(self):
        return hash((self._key, self._value))
