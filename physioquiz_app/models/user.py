"""User account model."""

from __future__ import annotations

from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.extensions import db


class User(UserMixin, db.Model):
    """Application user model."""
    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'
    ROLE_LABELS = {
        ROLE_ADMIN: 'Administrator',
        ROLE_USER: 'Player',
    }

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    password_hash = db.Column(db.String(256), nullable=False)
    user_role = db.Column(db.String(50), default=ROLE_USER, nullable=False)
    avatar_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    history = db.relationship('QuizHistory', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    leaderboard_entry = db.relationship('LeaderboardEntry', uselist=False, backref='user', cascade='all, delete-orphan')

    @property
    def is_admin(self) -> bool:
        return self.user_role == self.ROLE_ADMIN

    def get_id(self):
        return str(self.user_id)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.user_id}: {self.username}>"
