from mlrest.entities.base_tag import BaseTag


class RunTag(BaseTag):
    """Tag object associated with a run."""
