#!/usr/bin/env python3
"""
Feria TPV management CLI.

Usage:
    python manage.py migrate     Apply pending database migrations
    python manage.py serve       Run the API server
    python manage.py sync        Replay the terminal's pending sales
    python manage.py status      Show migrations, active fair and pending queue
    python manage.py check       Verify database integrity
"""

import argparse
import asyncio
import sys

from feria.config import configure_logging, get_settings


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from feria.infrastructure.storage.sqlite.migrations import run_migrations

    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        state = "ok" if result.success else f"FAILED ({result.error})"
        print(f"  {result.version}: {state}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run uvicorn in the foreground."""
    import uvicorn

    print(f"Starting server on {args.host}:{args.port}...")
    uvicorn.run(
        "feria.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


async def _sync() -> tuple[int, int]:
    from feria.application.services import get_sale_ledger
    from feria.infrastructure.storage.sqlite import close_pool

    try:
        ledger = await get_sale_ledger()
        drained = await ledger.on_connectivity_restored()
        return drained, ledger.pending_count
    finally:
        await close_pool()


def cmd_sync(args: argparse.Namespace) -> None:
    """Drain the pending queue into the store."""
    drained, remaining = asyncio.run(_sync())
    print(f"Replayed {drained} pending sale(s); {remaining} still queued.")
    if remaining:
        sys.exit(1)


async def _status() -> dict:
    from feria.application.services import get_lifecycle_manager, get_sale_ledger
    from feria.core.entities import FeriaActive
    from feria.infrastructure.storage.sqlite import close_pool
    from feria.infrastructure.storage.sqlite.migrations import get_migration_status

    try:
        migrations = await get_migration_status()
        if not migrations.exists:
            return {"migrations": migrations}

        state = await (await get_lifecycle_manager()).current_state()
        ledger = await get_sale_ledger()
        return {
            "migrations": migrations,
            "feria": state.config.name if isinstance(state, FeriaActive) else None,
            "pending": ledger.pending_count,
        }
    finally:
        await close_pool()


def cmd_status(args: argparse.Namespace) -> None:
    """Print migration, lifecycle and queue status."""
    status = asyncio.run(_status())
    migrations = status["migrations"]

    if not migrations.exists:
        print(f"No database at {get_settings().storage.db_path}. Run 'migrate' first.")
        return

    print(f"Applied migrations: {', '.join(migrations.applied) or '-'}")
    print(f"Pending migrations: {', '.join(migrations.pending) or '-'}")
    print(f"Active fair:        {status['feria'] or '(none)'}")
    print(f"Pending sales:      {status['pending']}")


def cmd_check(args: argparse.Namespace) -> None:
    """Run integrity checks."""
    from feria.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = asyncio.run(verify_schema_integrity())
    failed = False
    for check in checks:
        print(f"  {check['check']}: {check['status']}")
        failed = failed or check["status"] != "PASS"
    if failed:
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Feria TPV management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # serve
    settings = get_settings()
    p_serve = sub.add_parser("serve", help="Run the API server")
    p_serve.add_argument("--host", default=settings.api.host, help="Bind host")
    p_serve.add_argument("--port", type=int, default=settings.api.port, help="Bind port")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # sync
    p_sync = sub.add_parser("sync", help="Replay pending offline sales")
    p_sync.set_defaults(func=cmd_sync)

    # status
    p_status = sub.add_parser("status", help="Show fair and queue status")
    p_status.set_defaults(func=cmd_status)

    # check
    p_check = sub.add_parser("check", help="Verify database integrity")
    p_check.set_defaults(func=cmd_check)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
