"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from assistant_bridge.adapters.kv_store import KeyValueStoreAdapter
from assistant_bridge.adapters.mattermost import MattermostAdapter
from assistant_bridge.core.config import Settings, settings
from assistant_bridge.services import ServiceContainer, build_default_services
from assistant_bridge.services.identity_store import IdentityStore


def build_identity_store(config: Settings = settings) -> IdentityStore:
    """Return the identity store backed by the TinyDB link file under ``DATA_DIR``."""

    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return IdentityStore(
        KeyValueStoreAdapter(config.DATA_DIR / "links.json"),
        pseudonym_secret=config.LOG_PSEUDONYM_SECRET,
        scan_page_size=config.IDENTITY_SCAN_PAGE_SIZE,
    )


def build_default_service_container(config: Settings = settings) -> ServiceContainer:
    """Return the default service container wired to production adapters."""

    return build_default_services(
        config,
        identity_store=build_identity_store(config),
        chat_port=MattermostAdapter(
            config.MATTERMOST_URL,
            config.MATTERMOST_TOKEN,
            timeout=config.MATTERMOST_TIMEOUT_SECONDS,
        ),
    )


__all__ = ["build_default_service_container", "build_identity_store"]
