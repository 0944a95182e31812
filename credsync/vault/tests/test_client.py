"""Tests for the hvac-backed vault client — mock hvac, no server."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from hvac.exceptions import Forbidden, InvalidRequest
from requests.exceptions import ConnectionError as RequestsConnectionError

from credsync.config import Config, VaultConfig
from credsync.exceptions import SecretFetchError, VaultAuthError, VaultWriteError
from credsync.k8s.client import SourceSecret
from credsync.vault.client import VaultClient


def _hvac(authenticated: bool = True) -> MagicMock:
    client = MagicMock()
    client.is_authenticated.return_value = authenticated
    return client


def _config(**vault) -> Config:
    return Config(sync_secret_namespace="platform", vault=VaultConfig(**vault))


class TestAuthenticate:
    def test_token(self):
        hv = _hvac()
        vc = VaultClient.authenticate(_config(token="s.abc"), hvac_client=hv)
        assert vc.client is hv
        assert hv.token == "s.abc"

    def test_builds_hvac_client_from_config(self):
        cfg = _config(address="https://vault:8200", token="t", namespace="team", timeout=7)
        with patch("credsync.vault.client.hvac.Client", return_value=_hvac()) as ctor:
            VaultClient.authenticate(cfg)
        ctor.assert_called_once_with(
            url="https://vault:8200", namespace="team", verify=True, timeout=7
        )

    def test_no_credentials(self):
        with pytest.raises(VaultAuthError, match="no vault credentials"):
            VaultClient.authenticate(_config(), hvac_client=_hvac())

    def test_rejected_token(self):
        with pytest.raises(VaultAuthError, match="rejected"):
            VaultClient.authenticate(_config(token="bad"), hvac_client=_hvac(authenticated=False))

    def test_unreachable(self):
        hv = _hvac()
        hv.is_authenticated.side_effect = RequestsConnectionError("refused")
        with pytest.raises(VaultAuthError, match="refused"):
            VaultClient.authenticate(_config(token="t"), hvac_client=hv)

    def test_token_from_kubernetes_secret(self):
        secrets = MagicMock()
        secrets.get_secret.return_value = SourceSecret(
            name="vault-root",
            namespace="platform",
            last_updated_time=datetime(2026, 1, 1, tzinfo=UTC),
            data={"root-token": "s.from-secret"},
        )
        hv = _hvac()
        VaultClient.authenticate(
            _config(token_secret_name="vault-root"), secrets=secrets, hvac_client=hv
        )
        secrets.get_secret.assert_called_once_with("vault-root", "platform")
        assert hv.token == "s.from-secret"

    def test_token_secret_missing_key(self):
        secrets = MagicMock()
        secrets.get_secret.return_value = SourceSecret(
            name="vault-root",
            namespace="platform",
            last_updated_time=datetime(2026, 1, 1, tzinfo=UTC),
            data={"other": "x"},
        )
        with pytest.raises(VaultAuthError, match="root-token"):
            VaultClient.authenticate(
                _config(token_secret_name="vault-root"), secrets=secrets, hvac_client=_hvac()
            )

    def test_token_secret_unreadable(self):
        secrets = MagicMock()
        secrets.get_secret.side_effect = SecretFetchError("forbidden")
        with pytest.raises(VaultAuthError, match="token secret"):
            VaultClient.authenticate(
                _config(token_secret_name="vault-root"), secrets=secrets, hvac_client=_hvac()
            )

    def test_kubernetes_login(self, tmp_path):
        jwt = tmp_path / "token"
        jwt.write_text("eyJhbGciOi.jwt\n")
        hv = _hvac()
        VaultClient.authenticate(
            _config(kubernetes_role="credsync", service_account_token_path=str(jwt)),
            hvac_client=hv,
        )
        hv.auth.kubernetes.login.assert_called_once_with(
            role="credsync", jwt="eyJhbGciOi.jwt", mount_point="kubernetes"
        )

    def test_kubernetes_login_missing_jwt(self, tmp_path):
        cfg = _config(kubernetes_role="credsync", service_account_token_path=str(tmp_path / "nope"))
        with pytest.raises(VaultAuthError, match="kubernetes"):
            VaultClient.authenticate(cfg, hvac_client=_hvac())

    def test_kubernetes_login_denied(self, tmp_path):
        jwt = tmp_path / "token"
        jwt.write_text("jwt")
        hv = _hvac()
        hv.auth.kubernetes.login.side_effect = InvalidRequest("invalid role name")
        cfg = _config(kubernetes_role="credsync", service_account_token_path=str(jwt))
        with pytest.raises(VaultAuthError, match="invalid role"):
            VaultClient.authenticate(cfg, hvac_client=hv)


class TestPutCredential:
    def test_writes_kv2(self):
        hv = _hvac()
        VaultClient(hv).put_credential("secret", "certs/web/tls1", {"ca.pem": "A"})
        hv.secrets.kv.v2.create_or_update_secret.assert_called_once_with(
            path="certs/web/tls1", secret={"ca.pem": "A"}, mount_point="secret"
        )

    def test_forbidden(self):
        hv = _hvac()
        hv.secrets.kv.v2.create_or_update_secret.side_effect = Forbidden("permission denied")
        with pytest.raises(VaultWriteError, match="certs/web/tls1"):
            VaultClient(hv).put_credential("secret", "certs/web/tls1", {})

    def test_unreachable(self):
        hv = _hvac()
        hv.secrets.kv.v2.create_or_update_secret.side_effect = RequestsConnectionError("reset")
        with pytest.raises(VaultWriteError, match="reset"):
            VaultClient(hv).put_credential("secret", "a/b/c", {})
