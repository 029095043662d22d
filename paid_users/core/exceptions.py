class PaidUsersError(Exception):
    """Base exception for the paid users webhook service."""

    pass


class SignatureInvalid(PaidUsersError):
    """Raised when a webhook payload cannot be authenticated or parsed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StoreError(PaidUsersError):
    """Raised when the paid-user store rejects a write."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
