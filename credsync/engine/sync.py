"""
Vault credential sync job.

One cycle reads the sync secret from Kubernetes, skips out if it has not
changed since the previous cycle, and otherwise writes every recognised
entry to Vault. Failures are contained: a bad entry is logged and skipped,
a failed fetch or login ends the cycle, and nothing is raised to the caller.

Usage:
    job = VaultCredSync(get_config())
    result = job.run_cycle()
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from credsync.config import Config
from credsync.engine.models import CredentialKind, CycleResult, CycleStatus, classify
from credsync.exceptions import (
    CredentialParseError,
    CredentialSyncError,
    CredentialValidationError,
    CredentialWriteError,
    VaultAuthError,
    VaultWriteError,
)
from credsync.k8s.client import K8sSecretClient
from credsync.vault.client import VaultClient
from credsync.vault.paths import credential_mount_path, prepare_credential_secret_path

logger = logging.getLogger(__name__)


class VaultCredSync:
    """Syncs credentials from one Kubernetes secret into Vault."""

    def __init__(
        self,
        config: Config,
        secret_client_factory: Callable[[], K8sSecretClient] = K8sSecretClient,
        vault_factory: Callable[[Config], VaultClient] = VaultClient.authenticate,
    ) -> None:
        self.config = config
        self.secret_client_factory = secret_client_factory
        self.vault_factory = vault_factory
        # Timestamp of the last secret version fully processed
        self.last_updated_time: datetime | None = None
        self.last_resource_version = ""
        self._cycle_lock = threading.Lock()

    def cron_spec(self) -> str:
        return self.config.sync_frequency

    def run_cycle(self) -> CycleResult:
        """Run one sync cycle. Never raises."""
        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("Vault credential sync already in progress, skipping")
            return CycleResult(status=CycleStatus.BUSY)
        start = time.monotonic()
        try:
            result = self._run_cycle()
        finally:
            self._cycle_lock.release()
        result.duration_ms = int((time.monotonic() - start) * 1000)
        return result

    def _run_cycle(self) -> CycleResult:
        logger.debug("started vault credential sync job")
        name = self.config.sync_secret_name
        namespace = self.config.sync_secret_namespace

        try:
            secret = self.secret_client_factory().get_secret(name, namespace)
        except Exception as e:
            logger.debug("failed to read sync secret, %s", e)
            logger.warning("Sync secret %s/%s unavailable, will retry next cycle", namespace, name)
            return CycleResult(status=CycleStatus.FETCH_FAILED)
        logger.debug("found %d secret values to sync", len(secret.data))

        if (
            self.last_updated_time is not None
            and self.last_updated_time == secret.last_updated_time
            and self.last_resource_version == secret.resource_version
        ):
            logger.debug("no change in secret")
            return CycleResult(
                status=CycleStatus.UNCHANGED, secret_updated_at=secret.last_updated_time
            )

        try:
            vault = self.vault_factory(self.config)
        except VaultAuthError as e:
            logger.error("%s", e)
            return CycleResult(status=CycleStatus.AUTH_FAILED)
        except Exception as e:
            logger.error("failed to init vault client, %s", e)
            return CycleResult(status=CycleStatus.AUTH_FAILED)

        result = CycleResult(status=CycleStatus.COMPLETED, secret_updated_at=secret.last_updated_time)
        for key, value in secret.data.items():
            kind = classify(key)
            if kind is None:
                logger.info("credential type %s not supported", key)
                result.skipped += 1
                continue
            try:
                self.store_credential(vault, kind, key, value)
            except CredentialSyncError as e:
                logger.error("%s", e)
                result.failed += 1
                continue
            except Exception as e:
                logger.error("unexpected error syncing %s: %s", key, e)
                result.failed += 1
                continue
            result.written += 1

        self.last_updated_time = secret.last_updated_time
        self.last_resource_version = secret.resource_version
        logger.debug(
            "vault credential sync job completed: %d written, %d failed, %d skipped",
            result.written,
            result.failed,
            result.skipped,
        )
        return result

    def store_credential(self, vault: VaultClient, kind: CredentialKind, key: str, raw: str) -> None:
        """Parse, validate and write one entry. Raises CredentialSyncError."""
        try:
            record = kind.record_type.model_validate_json(raw)
        except ValidationError as e:
            raise CredentialParseError(
                key, f"failed to parse {key} secret data: {e.error_count()} error(s), "
                f"first: {e.errors()[0]['msg']}"
            ) from e

        missing = record.missing_fields()
        if missing:
            raise CredentialValidationError(
                key,
                f"credential attributes are empty for {key} secret data: "
                f"missing {', '.join(missing)}",
                missing,
            )

        try:
            secret_path = prepare_credential_secret_path(
                record.path_prefix, record.entity_name, record.identifier
            )
        except ValueError as e:
            raise CredentialValidationError(
                key, f"invalid vault path for {key} secret data: {e}", []
            ) from e

        try:
            vault.put_credential(credential_mount_path(self.config), secret_path, record.attributes())
        except VaultWriteError as e:
            raise CredentialWriteError(key, f"failed to write {key} secret data to vault: {e}") from e

        if kind is CredentialKind.GENERIC:
            logger.info(
                "stored sync credential for %s/%s/%s",
                record.path_prefix,
                record.entity_name,
                record.identifier,
            )
        elif kind is CredentialKind.CERTS:
            logger.info("stored sync cert for %s/%s", record.entity_name, record.identifier)
        else:
            logger.info(
                "stored sync service credential for %s/%s", record.entity_name, record.identifier
            )

    def store_service_credential(self, vault: VaultClient, key: str, raw: str) -> None:
        self.store_credential(vault, CredentialKind.SERVICE_CRED, key, raw)

    def store_certificate(self, vault: VaultClient, key: str, raw: str) -> None:
        self.store_credential(vault, CredentialKind.CERTS, key, raw)

    def store_generic_credential(self, vault: VaultClient, key: str, raw: str) -> None:
        self.store_credential(vault, CredentialKind.GENERIC, key, raw)
