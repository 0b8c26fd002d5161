"""Exception types raised by the closure routing core."""


class RecomputationFailure(RuntimeError):
    """The routing service was unreachable or returned unusable geometry."""


class IndexOutOfRange(IndexError):
    """A registry index no longer points at a record (stale UI state)."""


class VisualHandleError(RuntimeError):
    """A record's visual handle is out of sync with the map surface."""


class GeocodingError(RuntimeError):
    """The geocoding service failed to answer a place search."""


class UnknownBasemap(ValueError):
    """The requested basemap is not in the catalogue."""
