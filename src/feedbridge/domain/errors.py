"""Error taxonomy for the Feedbridge data layer."""


class FeedbridgeError(Exception):
    """Base error for Feedbridge failures."""


class UnauthenticatedError(FeedbridgeError):
    """Raised when an operation is attempted without a user identity."""

    def __init__(self, message: str = "User is not authenticated.") -> None:
        super().__init__(message)


class NotFoundError(FeedbridgeError):
    """Raised when a referenced baby or entry does not exist."""


class DuplicateBabyError(FeedbridgeError):
    """Raised when a baby name is already used by the same user."""


class DecodeError(FeedbridgeError, ValueError):
    """Raised when a stored document does not match the expected shape."""


class RemoteStoreError(FeedbridgeError):
    """Raised when the remote store returns an unusable response."""
