"""Exception hierarchy shared by the services and the HTTP layer."""


class PortalError(Exception):
    """Base class for errors surfaced to portal clients."""

    status_code = 500


class MissingFieldError(PortalError):
    """A required request field was absent or empty."""

    status_code = 400


class InvalidRequestError(PortalError):
    """A request field was present but unusable."""

    status_code = 400


class NotFoundError(PortalError):
    """A record or file on disk could not be found."""

    status_code = 404


class UploadTooLargeError(PortalError):
    """An uploaded file exceeded the configured size ceiling."""

    status_code = 413

    def __init__(self, limit: int):
        super().__init__(f"File too large (limit is {limit} bytes)")
        self.limit = limit


class StoreCorruptedError(PortalError):
    """The record store file exists but is not a valid database document."""
