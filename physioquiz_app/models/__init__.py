"""Database models package for PhysioQuiz."""

from ..core.extensions import db

from .user import User
from .quiz import DailyQuestion, LeaderboardEntry, QuizAttempt, QuizHistory

__all__ = [
    'db',
    'User',
    'DailyQuestion',
    'QuizAttempt',
    'QuizHistory',
    'LeaderboardEntry',
]
