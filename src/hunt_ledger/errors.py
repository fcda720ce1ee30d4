"""Error taxonomy shared by services, adapters and the HTTP layer."""

from fastapi import status


class LedgerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Malformed input, out-of-range counts or missing required fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidIdentifier(LedgerError):
    """An identifier that is not in the store's id format."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(LedgerError):
    """A referenced record or blob is absent."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(LedgerError):
    """Underlying I/O failure on the record store or the blob store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
