#!/usr/bin/env python3
"""
=============================================================================
USER SERVICE - UNIFIED COMMANDER
=============================================================================
The single entry point for all developer operations.

Usage:
    python manage.py serve       # Run the HTTP API (supports --host, --port, --reload)
    python manage.py migrate     # Create the database schema
    python manage.py doctor      # Print effective config and check storage health
"""

import argparse
import asyncio
import sys

# Colors for terminal output
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

def log(msg, color=Colors.ENDC):
    print(f"{color}{msg}{Colors.ENDC}")

# Config keys whose values are never printed.
SECRET_KEYS = {"DB_PASSWORD", "DATABASE_URL"}

# --- COMMANDS ---

def serve(host=None, port=None, reload=False):
    """Launches uvicorn with the app factory."""
    import uvicorn

    from user_service.shared.config import settings

    host = host or settings.HOST
    port = port or settings.PORT
    log(f"\n🚀 Starting {settings.APP_NAME} on http://{host}:{port}", Colors.HEADER)

    uvicorn.run(
        "user_service.adapters.api.main:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SEC,
        log_config=None,
    )

async def _migrate():
    from user_service.adapters.persistence.database import init_models
    from user_service.shared.container import container

    engine = container.db_engine()
    try:
        await init_models(engine)
    finally:
        await engine.dispose()

def migrate():
    """Creates the users table and indexes."""
    from user_service.shared.config import StorageBackend, settings
    from user_service.shared.logging_config import configure_logging

    configure_logging()
    log("\n🛠  Running migrations...", Colors.HEADER)

    if settings.STORAGE_BACKEND != StorageBackend.SQL:
        log("   ⚠️  STORAGE_BACKEND is not 'sql'; nothing to migrate.", Colors.WARNING)
        return

    try:
        asyncio.run(_migrate())
    except Exception as e:
        log(f"   ❌ Migration failed: {e}", Colors.FAIL)
        sys.exit(1)
    log("   ✅ Schema is up to date.", Colors.GREEN)

def mask_config(values: dict) -> dict:
    return {
        key: ("***" if key in SECRET_KEYS and value else value)
        for key, value in values.items()
    }

async def _check_storage() -> bool:
    from user_service.shared.container import container

    repository = container.user_repository()
    try:
        return await repository.health_check()
    finally:
        await repository.disconnect()

def doctor():
    """System Diagnostic Tool."""
    from user_service.shared.config import settings

    log("\n🩺 Running Doctor...", Colors.HEADER)

    # 1. Effective configuration
    for key, value in sorted(mask_config(settings.model_dump(mode="json")).items()):
        log(f"   {key} = {value}", Colors.CYAN)

    # 2. Storage
    try:
        healthy = asyncio.run(_check_storage())
    except Exception as e:
        log(f"   ❌ Storage check raised: {e}", Colors.FAIL)
        healthy = False

    if healthy:
        log(f"   ✅ Storage ({settings.STORAGE_BACKEND.value}) is reachable.", Colors.GREEN)
    else:
        log(f"   ❌ Storage ({settings.STORAGE_BACKEND.value}) is NOT reachable.", Colors.FAIL)
        sys.exit(1)

    log("   ✅ Doctor complete.", Colors.GREEN)

# --- MAIN ---

def main(argv=None):
    parser = argparse.ArgumentParser(description="User Service Commander")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address (default: HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    # Migrate
    subparsers.add_parser("migrate", help="Create the database schema")

    # Doctor
    subparsers.add_parser("doctor", help="Run diagnostics")

    args = parser.parse_args(argv)

    # Default to help
    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        serve(host=args.host, port=args.port, reload=args.reload)

    elif args.command == "migrate":
        migrate()

    elif args.command == "doctor":
        doctor()

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        log("\n👋 Interrupted.", Colors.WARNING)
        sys.exit(130)
