"""
Auth Service - account creation and credential checks.
"""
from flask import current_app

from physioquiz_app.models import User, db


class AuthService:
    """Service for authentication related operations."""

    @staticmethod
    def register_user(username, password, email=None):
        """
        Create a player account.

        Returns:
            the new User
        """
        user = User(
            username=username.strip(),
            email=(email or '').strip() or None,
            user_role=User.ROLE_USER,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        current_app.logger.info(f"User registered: {user.username} ({user.user_id})")
        return user

    @staticmethod
    def authenticate_user(username, password):
        """
        Verify credentials.

        Returns:
            User object if valid, None otherwise.
        """
        user = User.query.filter_by(username=(username or '').strip()).first()
        if user and user.check_password(password):
            return user
        return None
