"""Infrastructure adapter exports."""

from assistant_bridge.core.exceptions import (  # noqa: F401
    ChatPlatformError,
    ChatUserNotFoundError,
    StorageError,
)

from .kv_store import KeyValueStoreAdapter
from .mattermost import MattermostAdapter

__all__ = [
    "KeyValueStoreAdapter",
    "MattermostAdapter",
    "ChatPlatformError",
    "ChatUserNotFoundError",
    "StorageError",
]
