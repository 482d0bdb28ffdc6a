"""Role model definition."""

from . import db

DEFAULT_ROLES = ("admin", "user")


class Role(db.Model):
    """Named permission group referenced by users."""

    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(256), unique=True, nullable=False)

    @classmethod
    def find_by_name(cls, name: str) -> "Role | None":
        return cls.query.filter_by(name=name).first()

    @classmethod
    def ensure_defaults(cls) -> list["Role"]:
        """Create any missing built-in roles and return all of them."""

        roles = []
        for name in DEFAULT_ROLES:
            role = cls.find_by_name(name)
            if role is None:
                role = cls(name=name)
                db.session.add(role)
            roles.append(role)
        db.session.commit()
        return roles

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Role {self.name}>"
