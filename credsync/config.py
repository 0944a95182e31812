"""
Centralized configuration for credsync.

All configuration is loaded from environment variables with sensible defaults
and resolved once at startup.

Usage:
    from credsync.config import get_config
    cfg = get_config()
    print(cfg.sync_secret_name)     # "vault-cred-sync-data"
    print(cfg.vault.address)        # "http://127.0.0.1:8200" or $VAULT_ADDR
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_SA_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


@dataclass(frozen=True)
class VaultConfig:
    """Vault connection and authentication parameters."""

    address: str = "http://127.0.0.1:8200"
    token: str = ""
    namespace: str = ""  # Vault Enterprise namespace, not a Kubernetes one
    ca_cert: str = ""
    timeout: int = 30
    mount_path: str = "secret"

    # Token stored in a Kubernetes secret (e.g. the one written at unseal time)
    token_secret_name: str = ""
    token_secret_key: str = "root-token"

    # Kubernetes auth method
    kubernetes_role: str = ""
    kubernetes_auth_path: str = "kubernetes"
    service_account_token_path: str = DEFAULT_SA_TOKEN_PATH

    @property
    def verify(self) -> str | bool:
        """Value for hvac's ``verify`` argument."""
        return self.ca_cert or True

    @property
    def auth_method(self) -> str:
        """Which login flow ``VaultClient.authenticate`` will use."""
        if self.token:
            return "token"
        if self.token_secret_name:
            return "token-secret"
        if self.kubernetes_role:
            return "kubernetes"
        return "none"


@dataclass(frozen=True)
class Config:
    """Top-level credsync configuration."""

    # Source secret
    sync_secret_name: str = "vault-cred-sync-data"
    sync_secret_namespace: str = "default"

    # Scheduling
    sync_frequency: str = "*/2 * * * *"
    timezone: str = "UTC"

    log_level: str = "INFO"

    vault: VaultConfig = field(default_factory=VaultConfig)


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    vault = VaultConfig(
        address=os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200"),
        token=os.environ.get("VAULT_TOKEN", ""),
        namespace=os.environ.get("VAULT_NAMESPACE", ""),
        ca_cert=os.environ.get("VAULT_CACERT", ""),
        timeout=int(os.environ.get("CREDSYNC_VAULT_TIMEOUT", "30")),
        mount_path=os.environ.get("CREDSYNC_VAULT_MOUNT", "secret"),
        token_secret_name=os.environ.get("CREDSYNC_VAULT_TOKEN_SECRET", ""),
        token_secret_key=os.environ.get("CREDSYNC_VAULT_TOKEN_SECRET_KEY", "root-token"),
        kubernetes_role=os.environ.get("CREDSYNC_VAULT_K8S_ROLE", ""),
        kubernetes_auth_path=os.environ.get("CREDSYNC_VAULT_K8S_AUTH_PATH", "kubernetes"),
        service_account_token_path=os.environ.get("CREDSYNC_SA_TOKEN_PATH", DEFAULT_SA_TOKEN_PATH),
    )

    return Config(
        sync_secret_name=os.environ.get("CREDSYNC_SECRET_NAME", "vault-cred-sync-data"),
        sync_secret_namespace=os.environ.get("CREDSYNC_SECRET_NAMESPACE", "default"),
        sync_frequency=os.environ.get("CREDSYNC_SYNC_FREQUENCY", "*/2 * * * *"),
        timezone=os.environ.get("CREDSYNC_TIMEZONE", "UTC"),
        log_level=os.environ.get("CREDSYNC_LOG_LEVEL", "INFO").upper(),
        vault=vault,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
