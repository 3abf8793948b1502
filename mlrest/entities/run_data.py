from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.metric import Metric
from mlrest.entities.param import Param
from mlrest.entities.run_tag import RunTag


class RunData(_MlrestObject):
    """
    Run data (metrics, parameters and tags).
    """

    def __init__(self, metrics=None, params=None, tags=None):
        """
        Construct a new :py:class:`mlrest.entities.RunData` instance.

        Args:
            metrics: List of :py:class:`mlrest.entities.Metric`.
            params: List of :py:class:`mlrest.entities.Param`.
            tags: List of :py:class:`mlrest.entities.RunTag`.
        """
        # Keep the metric objects in server order, the dict only holds the latest value per key.
        self._metric_objs = list(metrics or [])
        self._metrics = {metric.key: metric.value for metric in self._metric_objs}
        self._params = {param.key: param.value for param in (params or [])}
        self._tags = {tag.key: tag.value for tag in (tags or [])}

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    @property
    def metrics(self):
        """
        Dictionary of string key -> metric value for the current run.
        For each metric key, the metric value with the latest timestamp is returned.
        """
        return self._metrics

    @property
    def params(self):
        """Dictionary of param key (string) -> param value for the current run."""
        return self._params

    @property
    def tags(self):
        """Dictionary of tag key (string) -> tag value for the current run."""
        return self._tags

    def metric_objects(self):
        """The :py:class:`mlrest.entities.Metric` objects reported by the server, in order."""
        return list(self._metric_objs)

    def _add_metric(self, metric):
        self._metrics[metric.key] = metric.value
        self._metric_objs.append(metric)

    def _add_param(self, param):
        self._params[param.key] = param.value

    def _add_tag(self, tag):
        self._tags[tag.key] = tag.value

    def to_dictionary(self):
        return {
            "metrics": self.metrics,
            "params": self.params,
            "tags": self.tags,
        }

    @classmethod
    def from_json_dict(cls, js_dict):
        run_data = cls()
        for js_metric in js_dict.get("metrics", []):
            run_data._add_metric(Metric.from_json_dict(js_metric))
        for js_param in js_dict.get("params", []):
            run_data._add_param(Param.from_json_dict(js_param))
        for js_tag in js_dict.get("tags", []):
            run_data._add_tag(RunTag.from_json_dict(js_tag))
        return run_data
