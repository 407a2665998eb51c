"""
Create an account from the shell. Run from project root:
  python -m rolegate.scripts.create_user LOGIN PASSWORD [role]
Example:
  python -m rolegate.scripts.create_user alice s3cret admin
"""
import argparse
import sys

from dotenv import load_dotenv

from rolegate.core.config import get_settings
from rolegate.core.context import AppContext
from rolegate.core.database import init_schema
from rolegate.core.security import hash_password
from rolegate.services.accounts import (
    ADMIN_ROLE,
    USER_ROLE,
    ConstraintViolation,
    create_user,
    find_or_create_role,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Rolegate account.")
    parser.add_argument("login", help="Login (unique)")
    parser.add_argument("password", help="Password")
    parser.add_argument("role", nargs="?", default=USER_ROLE, choices=[USER_ROLE, ADMIN_ROLE])
    args = parser.parse_args(argv)

    login = args.login.strip()
    if not login:
        print("Login must not be empty.", file=sys.stderr)
        return 1
    if not args.password:
        print("Password must not be empty.", file=sys.stderr)
        return 1

    context = AppContext.from_settings(get_settings())
    init_schema(context.engine)
    db = context.session_factory()
    try:
        role = find_or_create_role(db, args.role)
        try:
            create_user(db, login, hash_password(args.password), role.id)
        except ConstraintViolation as e:
            print(f"Could not create '{login}': {e.message}", file=sys.stderr)
            return 1
        print(f"Created user '{login}' with role '{args.role}'.")
        return 0
    finally:
        db.close()
        context.engine.dispose()


if __name__ == "__main__":
    load_dotenv()
    sys.exit(main())
