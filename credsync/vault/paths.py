"""Vault path layout for synced credentials: ``<type>/<entity>/<identifier>``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from credsync.config import get_config

if TYPE_CHECKING:
    from credsync.config import Config


def credential_mount_path(config: Config | None = None) -> str:
    """KV v2 mount that every synced credential lives under."""
    cfg = config or get_config()
    return cfg.vault.mount_path.strip("/")


def prepare_credential_secret_path(credential_type: str, entity_name: str, identifier: str) -> str:
    """Build the secret path for a credential.

    Segments must be non-empty and slash-free so no two distinct triples can
    map to the same path.
    """
    for label, segment in (
        ("credential type", credential_type),
        ("entity name", entity_name),
        ("credential identifier", identifier),
    ):
        if not segment:
            raise ValueError(f"{label} must not be empty")
        if "/" in segment:
            raise ValueError(f"{label} must not contain '/': {segment!r}")
    return f"{credential_type}/{entity_name}/{identifier}"
