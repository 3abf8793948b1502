from mlrest.entities.base_tag import BaseTag


class ExperimentTag(BaseTag):
    """Tag object associated with an experiment."""
