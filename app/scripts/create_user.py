"""
Create an account directly in the identity directory (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NICKNAME PASSWORD [role]
Example:
  python -m app.scripts.create_user admin your-secure-password admin
"""
import argparse
import asyncio
import logging
import sys

from app.core.config import get_settings
from app.core.errors import AppError
from app.schemas.identity import ROLE_VALUES
from app.services.accounts import AccountService
from app.services.directory import DirectoryNotConfiguredError, build_directory


async def _create(nickname: str, password: str, role: str) -> int:
    settings = get_settings()
    try:
        directory = build_directory(settings)
    except DirectoryNotConfiguredError as e:
        print(e.message, file=sys.stderr)
        return 1
    try:
        result = await AccountService(directory, settings).register(
            nickname, password, terms_accepted=True, role=role, require_terms=False
        )
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        await directory.aclose()
    print(
        f"Created user '{result.profile.nickname}' ({result.profile.user_id}) "
        f"with role '{result.profile.role}'."
    )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Cromwell Pay account (bypasses the terms check).")
    parser.add_argument("nickname", help="Nickname (3-20 letters, digits or underscores)")
    parser.add_argument("password", help="Password (at least 6 characters)")
    parser.add_argument("role", nargs="?", default="user", choices=sorted(ROLE_VALUES))
    args = parser.parse_args()
    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    return asyncio.run(_create(args.nickname.strip(), args.password, args.role))


if __name__ == "__main__":
    sys.exit(main())
