"""Account-link store mapping assistant identities to chat platform accounts.

Each link is stored as ``external identity -> account id`` in the key-value
store. Linking is compare-and-set (create if absent), so two racing
``connect`` commands for the same identity cannot both win.
"""

from __future__ import annotations

from assistant_bridge.core.exceptions import (
    AlreadyLinkedError,
    IdentityNotFoundError,
    NotLinkedError,
)
from assistant_bridge.core.identifiers import get_log_safe_identity
from assistant_bridge.core.logging import get_logger
from assistant_bridge.core.ports import KeyValueStorePort

logger = get_logger(__name__)

DEFAULT_SCAN_PAGE_SIZE = 100


class IdentityStore:
    """Link, unlink, and resolve account links.

    ``StorageError`` from the key-value store propagates unchanged; callers log
    it. Nothing here retries.
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        *,
        pseudonym_secret: str,
        scan_page_size: int = DEFAULT_SCAN_PAGE_SIZE,
    ) -> None:
        self._store = store
        self._secret = pseudonym_secret
        self._scan_page_size = scan_page_size

    def _safe(self, identity: str) -> str:
        return get_log_safe_identity(identity, secret=self._secret)

    def link(self, external_identity: str, account_id: str) -> None:
        """Bind ``external_identity`` to ``account_id`` if it is not yet bound.

        Re-linking the same pair succeeds; a different existing account raises
        ``AlreadyLinkedError``.
        """
        if self._store.compare_and_set(external_identity, None, account_id):
            logger.info("linked identity %s", self._safe(external_identity))
            return
        current = self._store.get(external_identity)
        if current == account_id:
            return
        raise AlreadyLinkedError(f"identity {self._safe(external_identity)} is already linked")

    def unlink(self, external_identity: str) -> None:
        """Remove the link for ``external_identity``."""
        if not self._store.delete(external_identity):
            raise IdentityNotFoundError(f"identity {self._safe(external_identity)} is not linked")
        logger.info("unlinked identity %s", self._safe(external_identity))

    def resolve(self, external_identity: str) -> str:
        """Return the account id linked to ``external_identity``."""
        account_id = self._store.get(external_identity)
        if not account_id:
            raise NotLinkedError(f"identity {self._safe(external_identity)} is not linked")
        return account_id

    def resolve_by_account_id(self, account_id: str) -> str:
        """Return the identity linked to ``account_id``.

        Linear scan over the first page of keys (``scan_page_size``); the link
        table is expected to stay small, so there is no reverse index.
        """
        for key in self._store.list_keys(0, self._scan_page_size):
            if self._store.get(key) == account_id:
                return key
        raise IdentityNotFoundError(f"no identity linked to account {account_id}")

    def list_links(self, page: int = 0) -> list[tuple[str, str]]:
        """Return one page of ``(identity, account id)`` pairs."""
        links: list[tuple[str, str]] = []
        for key in self._store.list_keys(page, self._scan_page_size):
            account_id = self._store.get(key)
            if account_id:
                links.append((key, account_id))
        return links


__all__ = ["IdentityStore", "DEFAULT_SCAN_PAGE_SIZE"]
