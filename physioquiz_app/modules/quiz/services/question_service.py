"""
Question Service
Read access to scheduled questions for the quiz flow.
"""
from __future__ import annotations

import random
from typing import List, Optional

from physioquiz_app.models import DailyQuestion, QuizHistory, db


class QuestionService:
    """Queries used by the player-facing quiz."""

    @staticmethod
    def get_questions_for_date(quiz_date: str) -> List[DailyQuestion]:
        return (
            DailyQuestion.query
            .filter(DailyQuestion.quiz_date == quiz_date)
            .order_by(DailyQuestion.question_id.asc())
            .all()
        )

    @staticmethod
    def get_question(question_id: int) -> Optional[DailyQuestion]:
        return db.session.get(DailyQuestion, question_id)

    @staticmethod
    def get_practice_questions(today: str, limit: int, rng: Optional[random.Random] = None) -> List[DailyQuestion]:
        """Questions from past days only, shuffled and capped at `limit`."""
        rows = (
            DailyQuestion.query
            .filter(DailyQuestion.quiz_date < today)
            .order_by(DailyQuestion.quiz_date.desc(), DailyQuestion.question_id.asc())
            .all()
        )
        (rng or random).shuffle(rows)
        if limit and limit > 0:
            rows = rows[:limit]
        return rows

    @staticmethod
    def get_remote_score(user_id: int, quiz_date: str) -> Optional[int]:
        """Score already on the user's ledger for `quiz_date`, if any."""
        row = QuizHistory.query.filter_by(user_id=user_id, quiz_date=quiz_date).first()
        return row.score if row else None
