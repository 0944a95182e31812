"""
Main daemon entry point — runs the vault credential sync on its cron schedule.

Runs as: python -m credsync.engine.daemon  (or: credsync run)
"""

from __future__ import annotations

import asyncio
import logging
import signal

from credsync.config import Config, get_config
from credsync.engine.scheduler import CronScheduler
from credsync.engine.sync import VaultCredSync

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # kubernetes and hvac log request bodies at DEBUG
    for noisy in ("kubernetes", "urllib3", "hvac"):
        logging.getLogger(noisy).setLevel(max(logging.WARNING, logging.root.level))


async def main(config: Config | None = None, run_now: bool = False) -> None:
    """Start the scheduler and run until SIGTERM/SIGINT."""
    config = config or get_config()

    logger.info("Starting vault credential sync...")
    logger.info("Source secret: %s/%s", config.sync_secret_namespace, config.sync_secret_name)
    logger.info("Vault: %s (auth: %s)", config.vault.address, config.vault.auth_method)
    logger.info("Frequency: %s", config.sync_frequency)

    job = VaultCredSync(config)
    scheduler = CronScheduler(config, job)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:  # Windows
            pass

    task = asyncio.create_task(scheduler.start(run_now=run_now), name="scheduler")
    stopper = asyncio.create_task(stop.wait(), name="signal")
    done, pending = await asyncio.wait({task, stopper}, return_when=asyncio.FIRST_COMPLETED)

    for t in done:
        if t is task and t.exception():
            logger.error("Scheduler failed: %s", t.exception())

    logger.info("Shutting down...")
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.remove_signal_handler(sig)
        except NotImplementedError:
            pass
    await scheduler.stop()
    for t in pending:
        t.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    logger.info("Vault credential sync stopped")

    if task in done and task.exception():
        raise task.exception()


def run() -> None:
    """Entry point for python -m credsync.engine.daemon"""
    config = get_config()
    configure_logging(config.log_level)
    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
