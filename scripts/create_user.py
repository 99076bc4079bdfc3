"""
Provision a user and print an access token for it.

Usage:
    python scripts/create_user.py someone@example.com "Display Name"

If the email already exists, a fresh token is printed for the existing user.
"""
import sys
import os

# Add the parent directory to the path so we can import aurashift modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from aurashift.db.base import SessionLocal
from aurashift.core.security import create_access_token
from aurashift.services.users import create_user, get_user_by_email


def main(email: str, display_name: str) -> int:
    db = SessionLocal()
    try:
        user = get_user_by_email(db, email)
        if user is None:
            user = create_user(db, email=email, display_name=display_name)
            print(f"Created user id={user.id} email={user.email}")
        else:
            print(f"User already exists id={user.id} email={user.email}")
        print(create_access_token(user.id, user.email))
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    sys.exit(main(sys.argv[1], sys.argv[2]))
