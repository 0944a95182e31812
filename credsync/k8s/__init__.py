"""
Kubernetes secret access.

Public API:
    K8sSecretClient().get_secret(name, namespace)  → SourceSecret
"""

from __future__ import annotations

from credsync.k8s.client import K8sSecretClient, SourceSecret

__all__ = ["K8sSecretClient", "SourceSecret"]
