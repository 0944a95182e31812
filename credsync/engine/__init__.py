"""
Sync engine — the scheduled Kubernetes secret → Vault job.

Public API:
    VaultCredSync(config).run_cycle()   → CycleResult
    CronScheduler(config, job).start()  → run cycles on the cron spec
"""

from __future__ import annotations

from credsync.engine.models import CredentialKind, CycleResult, CycleStatus, classify
from credsync.engine.sync import VaultCredSync

__all__ = ["CredentialKind", "CycleResult", "CycleStatus", "VaultCredSync", "classify"]
