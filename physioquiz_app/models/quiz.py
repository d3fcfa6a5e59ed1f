"""Quiz content, score ledgers and the career leaderboard."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import event, select
from sqlalchemy.types import JSON

from ..core.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class DailyQuestion(db.Model):
    """A multiple-choice question scheduled for one calendar date."""

    __tablename__ = 'daily_quiz'

    question_id = db.Column(db.Integer, primary_key=True)
    question = db.Column(db.Text, nullable=False)
    # Ordered list of {"id": "a", "text": "..."}
    options = db.Column(JSON, nullable=False, default=list)
    correct_id = db.Column(db.String(5), nullable=False)
    quiz_date = db.Column(db.String(10), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def option_ids(self):
        return [option.get('id') for option in (self.options or [])]

    def is_correct(self, option_id) -> bool:
        return option_id is not None and str(option_id) == self.correct_id

    def to_public_dict(self):
        """Question as shown to a player (no answer key)."""
        return {
            'id': self.question_id,
            'question': self.question,
            'options': list(self.options or []),
            'date': self.quiz_date,
        }

    def to_dict(self):
        data = self.to_public_dict()
        data['correct_id'] = self.correct_id
        return data

    def __repr__(self):
        return f"<DailyQuestion {self.question_id} @ {self.quiz_date}>"


class QuizAttempt(db.Model):
    """Anonymous record of a finished daily session, used for analytics only."""

    __tablename__ = 'quiz_attempts'

    attempt_id = db.Column(db.Integer, primary_key=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    quiz_date = db.Column(db.String(10), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, index=True)


class QuizHistory(db.Model):
    """Per-user ledger: one score per user per quiz date."""

    __tablename__ = 'quiz_history'

    history_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    quiz_date = db.Column(db.String(10), nullable=False)
    score = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    __table_args__ = (db.UniqueConstraint('user_id', 'quiz_date', name='uq_quiz_history_user_date'),)

    def to_dict(self):
        return {'date': self.quiz_date, 'score': self.score}


class LeaderboardEntry(db.Model):
    """Career total per user. Written only by the QuizHistory roll-up below."""

    __tablename__ = 'leaderboard'

    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), primary_key=True)
    username = db.Column(db.String(80), nullable=False)
    avatar_url = db.Column(db.String(255), nullable=True)
    total_score = db.Column(db.Integer, nullable=False, default=0)
    games_played = db.Column(db.Integer, nullable=False, default=0)
    last_played_at = db.Column(db.DateTime(timezone=True), nullable=True)


@event.listens_for(QuizHistory, 'after_insert')
def _roll_up_career_total(mapper, connection, target):
    """Fold a new ledger row into the user's leaderboard entry.

    Runs inside the same transaction as the insert, so a rejected duplicate
    (user, date) row never reaches the total.
    """
    board = LeaderboardEntry.__table__
    users = db.metadata.tables['users']
    now = _utcnow()

    existing = connection.execute(
        select(board.c.user_id).where(board.c.user_id == target.user_id)
    ).first()

    if existing is None:
        user_row = connection.execute(
            select(users.c.username, users.c.avatar_url).where(users.c.user_id == target.user_id)
        ).first()
        connection.execute(
            board.insert().values(
                user_id=target.user_id,
                username=user_row.username if user_row else f'player-{target.user_id}',
                avatar_url=user_row.avatar_url if user_row else None,
                total_score=target.score or 0,
                games_played=1,
                last_played_at=now,
            )
        )
    else:
        connection.execute(
            board.update()
            .where(board.c.user_id == target.user_id)
            .values(
                total_score=board.c.total_score + (target.score or 0),
                games_played=board.c.games_played + 1,
                last_played_at=now,
            )
        )
