#!/usr/bin/env python3
"""
Grant Role Script.

Grants a role to an existing account directly in the database. Granting
roles over HTTP requires the OWNER role, so the first OWNER is created
with this script.

Usage:
    uv run python scripts/grant_role.py --email owner@example.com
    uv run python scripts/grant_role.py -e admin@example.com -r ADMIN
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from pathlib import Path
from sys import exit as sys_exit
from sys import path as sys_path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys_path.insert(0, str(project_root))

from blogapi.auth.identity import Role  # noqa: E402
from blogapi.db.database import close_db, transaction  # noqa: E402
from blogapi.errors import RoleAssignmentError  # noqa: E402
from blogapi.services.auth import AuthService  # noqa: E402


def parse_args() -> Namespace:
    """
    Parse command line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments with defaults applied.
    """
    parser = ArgumentParser(
        description="Grant a role to an existing account.",
        formatter_class=RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bootstrap the first owner
  uv run python scripts/grant_role.py -e owner@mysite.com

  # Grant ADMIN
  uv run python scripts/grant_role.py -e editor@mysite.com -r ADMIN
        """,
    )
    parser.add_argument("-e", "--email", required=True, help="Email of the account")
    parser.add_argument(
        "-r",
        "--role",
        type=Role,
        choices=list(Role),
        default=Role.OWNER,
        help="Role to grant (default: OWNER)",
    )
    return parser.parse_args()


async def grant(email: str, role: Role) -> None:
    """Grant ``role`` to the account registered under ``email``."""
    try:
        async with transaction() as session:
            await AuthService(session).grant_role(email, role)
    finally:
        await close_db()


async def main() -> int:
    """
    Run the role grant.

    Returns
    -------
    int
        Exit code (0 for success, 1 for error).
    """
    args = parse_args()

    try:
        await grant(args.email, args.role)
    except RoleAssignmentError:
        print(f"\n❌ Error: no account registered under '{args.email}'")
        return 1

    print(f"\n✅ {args.role} granted to {args.email}")
    return 0


if __name__ == "__main__":
    sys_exit(asyncio_run(main()))
