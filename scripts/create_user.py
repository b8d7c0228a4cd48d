#!/usr/bin/env python3
"""Create a login account for the HR directory.

The first HR or ADMIN account has to be created out-of-band because the API
has no sign-up endpoint. Optionally links the account to an existing
employee by email so employee-scoped endpoints work for it.

Usage:
    python scripts/create_user.py --username admin --role ADMIN
    python scripts/create_user.py --username jane --role MANAGER --employee-email jane@example.com
    python scripts/create_user.py --username ops --role HR --password-stdin < secret.txt

Requires DATABASE_URL and JWT_SECRET in the environment or .env
"""

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path

# ── Path setup ────────────────────────────────────────────────────────
SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from hr_backend.auth.service import create_user
from hr_backend.common.constants import UserRole
from hr_backend.common.exceptions import AppException
from hr_backend.common.request_logging import configure_logging
from hr_backend.core_hr.models import Employee
from hr_backend.database import async_session_factory, engine

logger = logging.getLogger("create_user")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--username", required=True)
    parser.add_argument(
        "--role",
        required=True,
        choices=[role.value for role in UserRole],
    )
    parser.add_argument("--employee-email", help="link the account to this employee")
    parser.add_argument(
        "--password-stdin",
        action="store_true",
        help="read the password from stdin instead of prompting",
    )
    return parser.parse_args(argv)


def _read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        raise SystemExit("Passwords do not match.")
    return password


async def _create(args: argparse.Namespace, password: str) -> int:
    async with async_session_factory() as session:
        employee_id = None
        if args.employee_email:
            result = await session.execute(
                select(Employee.id).where(Employee.email == args.employee_email),
            )
            employee_id = result.scalar_one_or_none()
            if employee_id is None:
                logger.error("No employee with email %s", args.employee_email)
                return 1

        try:
            user = await create_user(
                session,
                username=args.username,
                password=password,
                role=UserRole(args.role),
                employee_id=employee_id,
            )
            await session.commit()
        except AppException as exc:
            logger.error("%s", exc.detail)
            return 1
        except IntegrityError:
            logger.error("Username or employee link was taken concurrently; nothing created")
            return 1
        logger.info("Created user %s (%s)", user.username, user.role.value)
    return 0


async def _run(args: argparse.Namespace, password: str) -> int:
    try:
        return await _create(args, password)
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    configure_logging("info")
    args = _parse_args(argv)
    password = _read_password(args.password_stdin)
    if not password:
        logger.error("Password must not be empty")
        return 1
    return asyncio.run(_run(args, password))


if __name__ == "__main__":
    sys.exit(main())
