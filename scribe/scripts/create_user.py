"""
Create a user (e.g. the first admin). Run from project root:
  python -m scribe.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m scribe.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from scribe.core.database import SessionLocal
from scribe.core.errors import ScribeError
from scribe.models.user import ROLES
from scribe.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create a Scribe user. The only way to grant the admin role."
    )
    parser.add_argument("username", help="Username (1-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = create_user(db, args.username, args.email, args.password, role=args.role)
    except ScribeError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
