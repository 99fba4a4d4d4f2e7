#!/usr/bin/env python3
# =============================================================================
# scripts/manage.py - Project Management Commands
# =============================================================================
# The single entry point for developer operations.
#
# Usage:
#   python scripts/manage.py initdb [--reset]
#   python scripts/manage.py createsuperuser --username admin --email a@b.com
#   python scripts/manage.py runserver [--host 0.0.0.0] [--port 8000] [--reload]
#   python scripts/manage.py check
#
# Environment variables must be set (or a .env file present) exactly as for
# the web app; see app/config.py.
# =============================================================================

import argparse
import getpass
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.exceptions import UsernameTakenError
from core.models.user import UserCreate
from core.services.user_service import UserService
from core.validators import (
    validate_email,
    validate_password,
    validate_password_pair,
    validate_username,
)
from lib.database import check_connection, drop_db, init_db, session_scope


def cmd_initdb(reset: bool = False) -> int:
    """Create tables (dropping them first with --reset)."""
    if reset:
        drop_db()
    init_db()
    print(f"Database ready: {settings.DATABASE_URL}")
    return 0


def _prompt_password() -> str:
    password = getpass.getpass("Password: ")
    again = getpass.getpass("Password (again): ")
    errors = validate_password_pair(password, again)
    if errors:
        raise ValueError(errors[0])
    return password


def cmd_createsuperuser(
    username: str,
    email: str | None = None,
    password: str | None = None,
    force: bool = False,
) -> int:
    """
    Create a staff + superuser account.

    Prompts for the password when --password is not given. Password
    validators run unless --force is passed.
    """
    errors = validate_username(username) + (validate_email(email) if email else [])
    if errors:
        print(f"Error: {errors[0]}", file=sys.stderr)
        return 1

    if password is None:
        try:
            password = _prompt_password()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if not force:
        errors = validate_password(password, {"username": username, "email": email})
        if errors:
            for message in errors:
                print(f"Error: {message}", file=sys.stderr)
            print("Use --force to bypass password validation.", file=sys.stderr)
            return 1

    try:
        data = UserCreate(username=username, password=password, email=email or None)
    except ValidationError as e:
        for err in e.errors():
            print(f"Error: {err['loc'][0]}: {err['msg']}", file=sys.stderr)
        return 1

    init_db()
    try:
        with session_scope() as db:
            user = UserService.create_superuser(
                db, data.username, data.password, email=data.email
            )
            print(f"Superuser created: {user.username} (id={user.id})")
    except UsernameTakenError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    return 0


def cmd_runserver(host: str, port: int, reload: bool) -> int:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if settings.DEBUG else "info",
    )
    return 0


def cmd_check() -> int:
    """Print the effective configuration and test the database connection."""
    print("=" * 60)
    print(f"{settings.PROJECT_NAME} configuration")
    print("=" * 60)
    print(f"  Environment:    {settings.ENVIRONMENT}")
    print(f"  Debug:          {settings.DEBUG}")
    print(f"  Allowed hosts:  {', '.join(settings.allowed_hosts_list)}")
    print(f"  Installed apps: {', '.join(settings.installed_apps_list)}")
    print(f"  Database:       {settings.DATABASE_URL}")
    print(f"  Templates:      {settings.TEMPLATES_DIR}")
    print(f"  Static:         {settings.STATIC_URL} -> {settings.STATIC_ROOT}")
    print(f"  Media:          {settings.MEDIA_URL} -> {settings.MEDIA_ROOT}")

    warnings = []
    if settings.is_production and settings.DEBUG:
        warnings.append("DEBUG is enabled in production")
    if settings.is_production and settings.SECRET_KEY.startswith("dev-"):
        warnings.append("SECRET_KEY is the development default")
    if settings.is_production and not settings.SESSION_COOKIE_SECURE:
        warnings.append("SESSION_COOKIE_SECURE is off in production")

    try:
        check_connection()
        print("  Database check: ok")
    except SQLAlchemyError as e:
        print(f"  Database check: FAILED ({e})")
        return 1

    for warning in warnings:
        print(f"WARNING: {warning}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.PROJECT_NAME} management commands")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    initdb_parser = subparsers.add_parser("initdb", help="Create database tables")
    initdb_parser.add_argument("--reset", action="store_true", help="Drop all tables first")

    su_parser = subparsers.add_parser("createsuperuser", help="Create an admin account")
    su_parser.add_argument("--username", required=True)
    su_parser.add_argument("--email", default=None)
    su_parser.add_argument("--password", default=None, help="Prompted for when omitted")
    su_parser.add_argument("--force", action="store_true", help="Skip password validation")

    run_parser = subparsers.add_parser("runserver", help="Start the development server")
    run_parser.add_argument("--host", default=settings.API_HOST)
    run_parser.add_argument("--port", type=int, default=settings.API_PORT)
    run_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("check", help="Show configuration and test the database")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Default to help
    if not args.command:
        parser.print_help()
        return 0

    if args.command == "initdb":
        return cmd_initdb(reset=args.reset)
    if args.command == "createsuperuser":
        return cmd_createsuperuser(args.username, args.email, args.password, args.force)
    if args.command == "runserver":
        return cmd_runserver(args.host, args.port, args.reload)
    if args.command == "check":
        return cmd_check()
    return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)
