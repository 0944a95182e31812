"""
Kubernetes secret reader.

Loads in-cluster credentials when running as a pod and falls back to the
local kubeconfig for development. Secret values are base64-decoded so callers
only ever see text. Bytes that are not valid UTF-8 become U+FFFD instead of
failing the whole read.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError as TransportError

from credsync.exceptions import SecretFetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceSecret:
    """A decoded snapshot of one Kubernetes secret."""

    name: str
    namespace: str
    last_updated_time: datetime
    data: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""


def _load_api() -> client.CoreV1Api:
    """Build a CoreV1Api, preferring in-cluster config."""
    try:
        config.load_incluster_config()
    except ConfigException:
        logger.debug("Not running in-cluster, loading kubeconfig")
        config.load_kube_config()
    return client.CoreV1Api()


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def last_updated_time(metadata) -> datetime | None:
    """Newest managed-field write time, else the creation timestamp.

    The API server stamps a managed-fields entry on every write, so this
    moves whenever the secret content changes. Managed-field times only have
    one-second resolution, so two writes by the same manager within a second
    share a timestamp; compare ``resource_version`` as well.
    """
    times = [
        entry.time
        for entry in (getattr(metadata, "managed_fields", None) or [])
        if getattr(entry, "time", None) is not None
    ]
    if times:
        return _as_utc(max(times))
    created = getattr(metadata, "creation_timestamp", None)
    return _as_utc(created) if created is not None else None


def decode_data(raw: dict[str, str] | None) -> dict[str, str]:
    """Decode a V1Secret ``data`` mapping into UTF-8 strings."""
    decoded: dict[str, str] = {}
    for key, value in (raw or {}).items():
        if value is None:
            decoded[key] = ""
            continue
        raw_bytes = base64.b64decode(value, validate=True)
        try:
            decoded[key] = raw_bytes.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("secret value %s is not valid UTF-8", key)
            decoded[key] = raw_bytes.decode("utf-8", errors="replace")
    return decoded


class K8sSecretClient:
    """Reads namespaced secrets through the Kubernetes API."""

    def __init__(self, api: client.CoreV1Api | None = None) -> None:
        self._api = api

    @property
    def api(self) -> client.CoreV1Api:
        if self._api is None:
            try:
                self._api = _load_api()
            except (ConfigException, OSError) as e:
                raise SecretFetchError(f"failed to init k8s client: {e}") from e
        return self._api

    def get_secret(
        self, name: str, namespace: str, timeout: float | None = None
    ) -> SourceSecret:
        """Fetch and decode a secret. Raises SecretFetchError on any failure."""
        kwargs = {"_request_timeout": timeout} if timeout else {}
        try:
            secret = self.api.read_namespaced_secret(name=name, namespace=namespace, **kwargs)
        except ApiException as e:
            raise SecretFetchError(
                f"failed to read secret {namespace}/{name}: {e.status} {e.reason}"
            ) from e
        except TransportError as e:
            raise SecretFetchError(f"kubernetes API unreachable: {e}") from e

        try:
            data = decode_data(secret.data)
        except binascii.Error as e:
            raise SecretFetchError(f"secret {namespace}/{name} holds undecodable data: {e}") from e

        updated = last_updated_time(secret.metadata)
        if updated is None:
            raise SecretFetchError(f"secret {namespace}/{name} has no update timestamp")

        return SourceSecret(
            name=name,
            namespace=namespace,
            last_updated_time=updated,
            data=data,
            resource_version=getattr(secret.metadata, "resource_version", None) or "",
        )
