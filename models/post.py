"""Post model."""

from datetime import datetime

from . import db


class Post(db.Model):
    """A blog post written by a user."""

    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(1024), nullable=False)
    body = db.Column(db.Text, nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @classmethod
    def for_author(cls, author_id: int):
        """Query for posts by one author, newest first."""

        return cls.query.filter_by(author_id=author_id).order_by(cls.created_at.desc())

    def to_dict(self) -> dict:
        """Serialize the post."""

        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "authorId": self.author_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
