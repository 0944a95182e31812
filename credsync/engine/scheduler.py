"""
Cron Scheduler — APScheduler wrapper that drives the sync job.

One CronTrigger job built from the job's cron spec. max_instances=1 and
coalesce=True keep cycles from overlapping or piling up after a stall.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from credsync.engine.models import CycleResult

if TYPE_CHECKING:
    from credsync.config import Config
    from credsync.engine.sync import VaultCredSync

logger = logging.getLogger(__name__)

JOB_ID = "vault-cred-sync"


class CronScheduler:
    """APScheduler-based cron scheduler for sync cycles."""

    def __init__(self, config: Config, job: VaultCredSync) -> None:
        self.config = config
        self.job = job
        self.scheduler = AsyncIOScheduler(timezone=config.timezone)

    def register(self) -> None:
        """Add the sync job. Raises ValueError on a bad cron spec."""
        spec = self.job.cron_spec()
        try:
            trigger = CronTrigger.from_crontab(spec, timezone=self.config.timezone)
        except ValueError as e:
            logger.error("Invalid sync frequency %r: %s", spec, e)
            raise

        self.scheduler.add_job(
            self._run_sync,
            trigger=trigger,
            id=JOB_ID,
            name="vault credential sync",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=60,
        )
        logger.info("Registered vault credential sync: %s (%s)", spec, self.config.timezone)

    async def start(self, run_now: bool = False) -> None:
        """Register the job, start the scheduler and block forever."""
        self.register()
        self.scheduler.start()
        logger.info("Cron scheduler started")

        if run_now:
            await self._run_sync()

        # Keep running
        while True:
            await asyncio.sleep(60)

    async def _run_sync(self) -> CycleResult:
        """Run one blocking cycle off the event loop."""
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, self.job.run_cycle)
        logger.info("Sync cycle complete: %s", result.summary())
        return result

    async def stop(self) -> None:
        """Shut down the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Cron scheduler stopped")
