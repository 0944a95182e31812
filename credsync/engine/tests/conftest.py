"""
Test fixtures for the sync engine.

- Fake secret store whose content and timestamp tests can change between cycles
- Recording vault client
- A config that never reads the environment
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from credsync.config import Config, VaultConfig
from credsync.engine.sync import VaultCredSync
from credsync.exceptions import VaultWriteError
from credsync.k8s.client import SourceSecret

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FakeSecretStore:
    """Stands in for K8sSecretClient; one instance shared across cycles."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.updated = T0
        self.resource_version = ""
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    def set(self, data: dict[str, str], updated: datetime | None = None) -> None:
        self.data = dict(data)
        self.updated = updated or self.updated + timedelta(minutes=1)

    def get_secret(self, name: str, namespace: str, timeout=None) -> SourceSecret:
        self.calls.append((name, namespace))
        if self.error is not None:
            raise self.error
        return SourceSecret(
            name=name,
            namespace=namespace,
            last_updated_time=self.updated,
            data=dict(self.data),
            resource_version=self.resource_version,
        )


class RecordingVault:
    """Stands in for VaultClient; records writes, optionally fails some paths."""

    def __init__(self) -> None:
        self.writes: list[tuple[str, str, dict[str, str]]] = []
        self.fail_paths: set[str] = set()

    def put_credential(self, mount_path: str, secret_path: str, attributes: dict[str, str]) -> None:
        if secret_path in self.fail_paths:
            raise VaultWriteError(f"write to {mount_path}/{secret_path} failed: permission denied")
        self.writes.append((mount_path, secret_path, dict(attributes)))

    def paths(self) -> list[str]:
        return sorted(path for _, path, _ in self.writes)


@pytest.fixture
def sync_config() -> Config:
    return Config(
        sync_secret_name="vault-cred-sync-data",
        sync_secret_namespace="platform",
        sync_frequency="*/5 * * * *",
        vault=VaultConfig(token="s.test", mount_path="secret"),
    )


@pytest.fixture
def store() -> FakeSecretStore:
    return FakeSecretStore()


@pytest.fixture
def vault() -> RecordingVault:
    return RecordingVault()


@pytest.fixture
def auth_calls() -> list[Config]:
    return []


@pytest.fixture
def job(sync_config, store, vault, auth_calls) -> VaultCredSync:
    def _authenticate(config: Config) -> RecordingVault:
        auth_calls.append(config)
        return vault

    return VaultCredSync(
        sync_config,
        secret_client_factory=lambda: store,
        vault_factory=_authenticate,
    )
