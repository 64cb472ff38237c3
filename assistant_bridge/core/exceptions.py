"""Core exception types shared across layers."""


class IdentityStoreError(Exception):
    """Base error for account-link storage operations."""


class AlreadyLinkedError(IdentityStoreError):
    """Raised when linking an identity that is already bound to another account."""


class NotLinkedError(IdentityStoreError):
    """Raised when resolving an identity that has no linked account."""


class IdentityNotFoundError(IdentityStoreError):
    """Raised when unlinking or reverse-resolving a link that does not exist."""


class StorageError(IdentityStoreError):
    """Raised when the backing key-value store fails."""


class ChatPlatformError(Exception):
    """Raised when a call to the chat platform fails."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


class ChatUserNotFoundError(ChatPlatformError):
    """Raised when a username does not resolve to a chat platform account."""


class EnvelopeRejectedError(ValueError):
    """Raised when an inbound request cannot be accepted for dispatch."""


__all__ = [
    "IdentityStoreError",
    "AlreadyLinkedError",
    "NotLinkedError",
    "IdentityNotFoundError",
    "StorageError",
    "ChatPlatformError",
    "ChatUserNotFoundError",
    "EnvelopeRejectedError",
]
