"""
Attempt Service
Append-only analytics log of finished daily sessions.
"""
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from physioquiz_app.models import QuizAttempt, db


class AttemptService:

    @staticmethod
    def record_attempt(quiz_date: str, score: int):
        """Store an anonymous attempt. Failures are logged and swallowed so the player still sees a result."""
        try:
            attempt = QuizAttempt(quiz_date=quiz_date, score=int(score))
            db.session.add(attempt)
            db.session.commit()
            return attempt
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to record quiz attempt for {quiz_date}: {e}", exc_info=True)
            return None
