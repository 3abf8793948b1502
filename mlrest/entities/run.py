from typing import Any, Dict

from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.run_data import RunData
from mlrest.entities.run_info import RunInfo
from mlrest.exceptions import InvalidArgument


class Run(_MlrestObject):
    """
    Run object.
    """

    def __init__(self, run_info: RunInfo, run_data: RunData) -> None:
        if run_info is None:
            raise InvalidArgument("run_info cannot be None")
        self._info = run_info
        self._data = run_data if run_data is not None else RunData()

    def __eq__(self, other):
        if type(other) is type(self):
            return self.info == other.info and self.data == other.data
        return False

    @property
    def info(self) -> RunInfo:
        """
        The run metadata, such as the run id, start time, and status.

        :rtype: :py:class:`mlrest.entities.RunInfo`
        """
        return self._info

    @property
    def data(self) -> RunData:
        """
        The run data, including metrics, parameters, and tags.

        :rtype: :py:class:`mlrest.entities.RunData`
        """
        return self._data

    @classmethod
    def from_json_dict(cls, js_dict):
        return cls(
            RunInfo.from_json_dict(js_dict["info"]),
            RunData.from_json_dict(js_dict.get("data", {})),
        )

    def to_dictionary(self) -> Dict[Any, Any]:
        return {
            "info": self.info.to_dictionary(),
            "data": self.data.to_dictionary(),
        }
