class UploadError(Exception):
    """
    Base class for failures that end an upload with an error response.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(UploadError):
    """The incoming request is missing the file field."""


class TransferError(UploadError):
    """The provider could not be reached or rejected the upload."""


class ParseError(UploadError):
    """The provider accepted the upload but returned no usable identifier."""


class PersistenceError(UploadError):
    """The metadata write failed while strict metadata writes are enabled."""
