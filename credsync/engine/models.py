"""
Data models for the sync engine.

Plain dataclasses and enums, matching the frozen-dataclass pattern in
credsync.config.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from credsync.vault.models import (
    CERTS_PREFIX,
    GENERIC_PREFIX,
    SERVICE_CRED_PREFIX,
    CertificateData,
    CredentialRecord,
    GenericCredential,
    ServiceCredential,
)


class CredentialKind(StrEnum):
    """Closed set of credential shapes, keyed by source-secret key prefix.

    Declaration order is match precedence.
    """

    SERVICE_CRED = SERVICE_CRED_PREFIX
    CERTS = CERTS_PREFIX
    GENERIC = GENERIC_PREFIX

    @property
    def record_type(self) -> type[CredentialRecord]:
        return _RECORD_TYPES[self]


_RECORD_TYPES = {
    CredentialKind.SERVICE_CRED: ServiceCredential,
    CredentialKind.CERTS: CertificateData,
    CredentialKind.GENERIC: GenericCredential,
}


def classify(key: str) -> CredentialKind | None:
    """Return the kind whose prefix ``key`` starts with, first match wins."""
    for kind in CredentialKind:
        if key.startswith(kind.value):
            return kind
    return None


class CycleStatus(StrEnum):
    COMPLETED = "completed"
    UNCHANGED = "unchanged"
    FETCH_FAILED = "fetch_failed"
    AUTH_FAILED = "auth_failed"
    BUSY = "busy"


@dataclass
class CycleResult:
    """Outcome of one sync cycle."""

    status: CycleStatus
    secret_updated_at: datetime | None = None
    written: int = 0
    failed: int = 0
    skipped: int = 0
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status in (CycleStatus.COMPLETED, CycleStatus.UNCHANGED)

    def summary(self) -> str:
        return (
            f"status={self.status.value} written={self.written} "
            f"failed={self.failed} skipped={self.skipped} duration={self.duration_ms}ms"
        )
