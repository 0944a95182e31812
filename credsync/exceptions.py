"""Exception hierarchy shared by the secret store, vault and sync engine."""

from __future__ import annotations


class CredSyncError(Exception):
    pass


class SecretFetchError(CredSyncError):
    """The source Kubernetes secret could not be read."""


class VaultAuthError(CredSyncError):
    """No authenticated Vault session could be established."""


class VaultWriteError(CredSyncError):
    """Vault rejected a credential write or was unreachable."""


class CredentialSyncError(CredSyncError):
    """A single source entry could not be synced. Scoped to that entry."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class CredentialParseError(CredentialSyncError):
    pass


class CredentialValidationError(CredentialSyncError):
    def __init__(self, key: str, message: str, missing: list[str]) -> None:
        super().__init__(key, message)
        self.missing = missing


class CredentialWriteError(CredentialSyncError):
    pass
