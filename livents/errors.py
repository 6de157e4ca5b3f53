class LiventsError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LiventsError):
    status_code = 400


class NotFoundError(LiventsError):
    status_code = 404


class StorageError(LiventsError):
    """Raised when the backing store fails to read or write."""

    status_code = 500
