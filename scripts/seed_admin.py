"""Seed an administrator user."""

import os
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models import db
from models.role import Role
from models.user import User

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "AdminPass123")


def main() -> None:
    app = create_app()
    hasher = app.extensions["password_hasher"]
    with app.app_context():
        Role.ensure_defaults()
        admin_role = Role.find_by_name("admin")

        admin = User.find_by_email(ADMIN_EMAIL)
        if admin is None:
            admin = User(
                first_name="Site",
                last_name="Admin",
                display_name="admin",
                email=ADMIN_EMAIL,
                role_id=admin_role.id,
            )
            db.session.add(admin)
            action = "created"
        else:
            admin.role_id = admin_role.id
            action = "updated"
        admin.set_password(ADMIN_PASSWORD, hasher)
        db.session.commit()
        print(f"Admin user {action}: {ADMIN_EMAIL}")


if __name__ == "__main__":
    main()
