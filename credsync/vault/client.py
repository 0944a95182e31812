"""
Vault client — hvac session used for one sync cycle.

Login order:
    1. VAULT_TOKEN, if set
    2. a token stored in a Kubernetes secret (CREDSYNC_VAULT_TOKEN_SECRET)
    3. Kubernetes auth with the pod's service-account JWT
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import hvac
from hvac.exceptions import VaultError
from requests.exceptions import RequestException

from credsync.exceptions import SecretFetchError, VaultAuthError, VaultWriteError
from credsync.k8s.client import K8sSecretClient

if TYPE_CHECKING:
    from credsync.config import Config

logger = logging.getLogger(__name__)


def _token_from_secret(config: Config, secrets: K8sSecretClient | None) -> str:
    vault = config.vault
    secrets = secrets or K8sSecretClient()
    try:
        secret = secrets.get_secret(vault.token_secret_name, config.sync_secret_namespace)
    except SecretFetchError as e:
        raise VaultAuthError(f"failed to read vault token secret: {e}") from e
    token = secret.data.get(vault.token_secret_key, "")
    if not token:
        raise VaultAuthError(
            f"vault token secret {config.sync_secret_namespace}/{vault.token_secret_name} "
            f"has no {vault.token_secret_key!r} value"
        )
    return token


class VaultClient:
    """Authenticated wrapper over ``hvac.Client`` for KV v2 writes."""

    def __init__(self, client: hvac.Client) -> None:
        self.client = client

    @classmethod
    def authenticate(
        cls,
        config: Config,
        secrets: K8sSecretClient | None = None,
        hvac_client: hvac.Client | None = None,
    ) -> VaultClient:
        """Open a new session. Raises VaultAuthError on any failure."""
        vault = config.vault
        method = vault.auth_method
        if method == "none":
            raise VaultAuthError(
                "no vault credentials configured "
                "(set VAULT_TOKEN, CREDSYNC_VAULT_TOKEN_SECRET or CREDSYNC_VAULT_K8S_ROLE)"
            )

        client = hvac_client or hvac.Client(
            url=vault.address,
            namespace=vault.namespace or None,
            verify=vault.verify,
            timeout=vault.timeout,
        )

        try:
            if method == "token":
                client.token = vault.token
            elif method == "token-secret":
                client.token = _token_from_secret(config, secrets)
            else:
                jwt = Path(vault.service_account_token_path).read_text().strip()
                client.auth.kubernetes.login(
                    role=vault.kubernetes_role,
                    jwt=jwt,
                    mount_point=vault.kubernetes_auth_path,
                )
            authenticated = client.is_authenticated()
        except VaultAuthError:
            raise
        except (VaultError, RequestException, OSError) as e:
            raise VaultAuthError(f"vault login via {method} failed: {e}") from e

        if not authenticated:
            raise VaultAuthError(f"vault rejected {method} credentials at {vault.address}")

        logger.debug("Authenticated to vault at %s via %s", vault.address, method)
        return cls(client)

    def put_credential(self, mount_path: str, secret_path: str, attributes: dict[str, str]) -> None:
        """Create or overwrite the attribute set at ``mount_path/secret_path``."""
        try:
            self.client.secrets.kv.v2.create_or_update_secret(
                path=secret_path,
                secret=attributes,
                mount_point=mount_path,
            )
        except (VaultError, RequestException) as e:
            raise VaultWriteError(f"write to {mount_path}/{secret_path} failed: {e}") from e
