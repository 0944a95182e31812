"""
Vault side of the sync.

Public API:
    VaultClient.authenticate(config)                       → session
    VaultClient.put_credential(mount, path, attributes)    → write
    prepare_credential_secret_path(type, entity, ident)    → "type/entity/ident"
    credential_mount_path()                                → KV v2 mount
"""

from __future__ import annotations

from credsync.vault.client import VaultClient
from credsync.vault.models import (
    CertificateData,
    CredentialRecord,
    GenericCredential,
    ServiceCredential,
)
from credsync.vault.paths import credential_mount_path, prepare_credential_secret_path

__all__ = [
    "VaultClient",
    "CertificateData",
    "CredentialRecord",
    "GenericCredential",
    "ServiceCredential",
    "credential_mount_path",
    "prepare_credential_secret_path",
]
