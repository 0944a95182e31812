"""
Root-level shared test fixtures.

Inherited by the package test suites under credsync/ and by tests/.
"""

from __future__ import annotations

import pytest

from credsync.config import reset_config

CREDSYNC_ENV_VARS = [
    "CREDSYNC_SECRET_NAME",
    "CREDSYNC_SECRET_NAMESPACE",
    "CREDSYNC_SYNC_FREQUENCY",
    "CREDSYNC_TIMEZONE",
    "CREDSYNC_LOG_LEVEL",
    "CREDSYNC_VAULT_TIMEOUT",
    "CREDSYNC_VAULT_MOUNT",
    "CREDSYNC_VAULT_TOKEN_SECRET",
    "CREDSYNC_VAULT_TOKEN_SECRET_KEY",
    "CREDSYNC_VAULT_K8S_ROLE",
    "CREDSYNC_VAULT_K8S_AUTH_PATH",
    "CREDSYNC_SA_TOKEN_PATH",
    "VAULT_ADDR",
    "VAULT_TOKEN",
    "VAULT_NAMESPACE",
    "VAULT_CACERT",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove env vars that leak between tests and reset the config singleton."""
    for key in CREDSYNC_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()
