"""Seed the built-in roles."""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models.role import Role


def main() -> None:
    app = create_app()
    with app.app_context():
        roles = Role.ensure_defaults()
        app.logger.info("Roles present: %s", ", ".join(role.name for role in roles))


if __name__ == "__main__":
    main()
