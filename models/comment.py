"""Comment model."""

from datetime import datetime

from . import db


class Comment(db.Model):
    """A user's comment on a post."""

    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    body = db.Column(db.Text, nullable=False)
    post_id = db.Column(db.Integer, db.ForeignKey("posts.id"), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @classmethod
    def for_post(cls, post_id: int):
        """Query for a post's comments, oldest first."""

        return cls.query.filter_by(post_id=post_id).order_by(cls.created_at.asc(), cls.id.asc())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "body": self.body,
            "postId": self.post_id,
            "authorId": self.author_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
