"""
credsync CLI — entry point for all operations.

Usage:
    credsync run            # Start the scheduled sync daemon
    credsync once           # Run a single sync cycle and exit
    credsync status         # Show configuration and backend reachability
    credsync version        # Show version
"""

from __future__ import annotations

import argparse
import sys


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="credsync",
        description="credsync — sync credentials from a Kubernetes secret into Vault.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    # run
    run_parser = subparsers.add_parser("run", help="Start the scheduled sync daemon")
    run_parser.add_argument(
        "--run-now", action="store_true", help="Run one cycle immediately on startup"
    )

    # once
    subparsers.add_parser("once", help="Run a single sync cycle and exit")

    # status
    subparsers.add_parser("status", help="Show configuration and backend reachability")

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from credsync import __version__

        print(f"credsync {__version__}")
        return 0

    if args.command == "run":
        return _cmd_run(args)
    elif args.command == "once":
        return _cmd_once()
    elif args.command == "status":
        return _cmd_status()
    else:
        parser.print_help()
        return 0


def _cmd_run(args: argparse.Namespace) -> int:
    import asyncio

    from credsync.config import get_config
    from credsync.engine.daemon import configure_logging, main as daemon_main

    cfg = get_config()
    configure_logging(cfg.log_level)
    try:
        asyncio.run(daemon_main(cfg, run_now=args.run_now))
    except KeyboardInterrupt:
        pass
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_once() -> int:
    from credsync.config import get_config
    from credsync.engine.daemon import configure_logging
    from credsync.engine.sync import VaultCredSync

    cfg = get_config()
    configure_logging(cfg.log_level)
    result = VaultCredSync(cfg).run_cycle()
    print(result.summary())
    return 0 if result.ok else 1


def _cmd_status() -> int:
    from credsync import __version__
    from credsync.config import get_config

    cfg = get_config()
    print(f"credsync v{__version__}")
    print()

    # Source secret
    print(f"  Secret:      {cfg.sync_secret_namespace}/{cfg.sync_secret_name}")
    try:
        from credsync.k8s.client import K8sSecretClient

        secret = K8sSecretClient().get_secret(
            cfg.sync_secret_name, cfg.sync_secret_namespace, timeout=5
        )
        print(f"               {len(secret.data)} entries, updated {secret.last_updated_time.isoformat()}")
    except Exception as e:
        print(f"               UNREACHABLE — {e}")

    # Vault
    print(f"  Vault:       {cfg.vault.address} (mount {cfg.vault.mount_path}, auth {cfg.vault.auth_method})")
    try:
        import hvac

        client = hvac.Client(url=cfg.vault.address, verify=cfg.vault.verify, timeout=5)
        health = client.sys.read_health_status(method="GET")
        if isinstance(health, dict):
            sealed = "sealed" if health.get("sealed") else "unsealed"
            print(f"               Connected — Vault {health.get('version', '?')}, {sealed}")
        else:
            print(f"               Responded with HTTP {health.status_code}")
    except Exception as e:
        print(f"               UNREACHABLE — {e}")

    print()
    print(f"  Frequency:   {cfg.sync_frequency} ({cfg.timezone})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
