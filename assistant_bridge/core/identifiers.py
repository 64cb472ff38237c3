"""Identifier helpers for producing log-safe identity tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
from functools import lru_cache

PSEUDONYM_LENGTH = 16


def _encode_digest(digest: bytes) -> str:
    """URL-safe base64 encoding without padding."""
    token = base64.urlsafe_b64encode(digest).decode("ascii")
    return token.rstrip("=")


@lru_cache(maxsize=4096)
def _pseudonymize(value: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), value.encode("utf-8"), hashlib.sha256).digest()
    return _encode_digest(digest)[:PSEUDONYM_LENGTH]


def get_log_safe_identity(identity: str | None, *, secret: str) -> str:
    """Return a deterministic, non-reversible token for ``identity`` suitable for logs."""
    if not identity:
        return "-"
    if not secret:
        raise RuntimeError("LOG_PSEUDONYM_SECRET must be configured.")
    return _pseudonymize(identity, secret)


def clear_log_safe_identity_cache() -> None:
    """Clear cached pseudonyms (useful for tests or secret rotation)."""
    _pseudonymize.cache_clear()


__all__ = ["PSEUDONYM_LENGTH", "get_log_safe_identity", "clear_log_safe_identity_cache"]
