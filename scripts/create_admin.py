#!/usr/bin/env python3
"""Create the first admin account, or promote an existing user to admin.

Signup never grants admin rights, so this is how an admin comes to exist.

Usage:
    # From project root:
    python scripts/create_admin.py admin@example.com --name "Admin"

    # Password from the environment instead of a prompt:
    ADMIN_PASSWORD=... DATABASE_URL=postgresql://... \
        python scripts/create_admin.py admin@example.com
"""

import argparse
import getpass
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from expense_tracker.config import get_settings
from expense_tracker.database import create_db_engine, create_session_factory, init_db
from expense_tracker.errors import AppError
from expense_tracker.services.users import UserService
from expense_tracker.validation import MIN_PASSWORD_LENGTH


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create or promote an admin user.")
    parser.add_argument("email", help="Email address of the admin account")
    parser.add_argument("--name", default="Admin", help="Display name for a new account")
    return parser.parse_args(argv)


def create_admin(argv=None) -> int:
    args = parse_args(argv)
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    engine = create_db_engine(get_settings().database_url)
    init_db(engine)
    Session = create_session_factory(engine)
    session = Session()

    try:
        user = UserService(session).create_admin(args.email, password, args.name)
        print(f"Admin ready: {user.email} (id {user.id})")
        return 0
    except AppError as e:
        session.rollback()
        print(f"Error creating admin: {e.message}")
        return 1
    finally:
        session.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(create_admin())
