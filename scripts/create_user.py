import argparse
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import require_auth_settings
from app.database import session_scope
from app.services import signup


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a user for local development.")
    parser.add_argument("username")
    parser.add_argument("password")
    args = parser.parse_args()

    settings = require_auth_settings()
    with session_scope() as session:
        user, token = signup(session, args.username, args.password, settings)
    print(f"user {user.username} created (id={user.id})")
    print(f"token: {token}")


if __name__ == "__main__":
    main()
