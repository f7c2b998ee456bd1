"""Exception hierarchy shared by the store, embedding and manager layers."""


class StudioError(Exception):
    """Base class for all Vector Studio errors."""

    code = "internal"


class ValidationError(StudioError, ValueError):
    """Malformed or missing input, rejected before any store call."""

    code = "validation"


class CollectionAlreadyExists(StudioError):
    """A collection with the requested name is already present."""

    code = "already_exists"


class NotFoundError(StudioError):
    """A collection or document could not be found."""

    code = "not_found"


class CollectionNotFound(NotFoundError):
    """The named collection does not exist in the store."""


class DocumentNotFound(NotFoundError):
    """No stored chunk carries the requested id."""


class ServiceUnavailable(StudioError):
    """An external service is unreachable or returned an error."""

    code = "unavailable"


class EmbeddingServiceError(ServiceUnavailable):
    """The embedding endpoint failed for at least one text."""


class StoreUnavailable(ServiceUnavailable):
    """The vector database could not be reached."""


class CollectionStateError(StudioError):
    """An operation was attempted in the wrong collection lifecycle state."""
