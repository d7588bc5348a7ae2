from recurpipe.expander import ByFilter


class ValidInstantFilter(ByFilter):
    """Removes instants denoting dates the calendar does not have, like February 30th."""

    def __init__(self, metrics):
        self._metrics = metrics

    def filter(self, value):
        return not self._metrics.is_valid(value)
