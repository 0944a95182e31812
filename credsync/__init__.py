"""credsync — Kubernetes secret to Vault credential synchronisation."""

__version__ = "0.1.0"
