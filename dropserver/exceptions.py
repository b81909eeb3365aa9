"""Custom exception classes for the CodeDrop server."""


class DropError(Exception):
    """
    Base exception class for all CodeDrop errors.
    """
    pass


class ValidationError(DropError):
    """
    Raised when a request is malformed: missing field, bad type, bad base64 framing.
    """
    pass


class InvalidCodeFormatError(ValidationError):
    """
    Raised when a paste code does not have the expected numeric format.
    """
    pass


class PayloadTooLargeError(DropError):
    """
    Raised when a file, a batch, or a file count exceeds the configured limit.
    """
    pass


class PasteNotFoundError(DropError):
    """
    Raised when a code does not resolve to a live paste. Expired and absent
    pastes are reported the same way.
    """

    def __init__(self, message: str = "Content not found or expired"):
        super().__init__(message)


class EditForbiddenError(DropError):
    """
    Raised when editing a paste that is not editable text.
    """
    pass


class CodeSpaceExhaustedError(DropError):
    """
    Raised when no free code could be found within the allowed attempts.
    """
    pass


class UploadNotFoundError(DropError):
    """
    Raised when an upload id does not resolve to a session.
    """

    def __init__(self, message: str = "Upload session not found or expired"):
        super().__init__(message)


class UploadExpiredError(DropError):
    """
    Raised when a session is found but its TTL has already passed.
    """

    def __init__(self, message: str = "Upload session expired"):
        super().__init__(message)


class InvalidChunkIndexError(DropError):
    """
    Raised when a chunk index is outside [0, total_chunks).
    """
    pass


class UploadIncompleteError(DropError):
    """
    Raised when completing a session that has not received every chunk.
    """
    pass


class MissingChunkError(DropError):
    """
    Raised when a chunk payload is missing at completion time.
    """
    pass


class UploadInProgressError(DropError):
    """
    Raised when another request is already completing the same session.
    """
    pass


class StorageError(DropError):
    """
    Raised when the storage backend fails unexpectedly.
    """
    pass
