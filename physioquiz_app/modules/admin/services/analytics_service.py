"""
Analytics Service - Consolidated service for the admin dashboard.

Every figure is derived from the anonymous attempt log and the leaderboard.
"""
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from physioquiz_app.models import LeaderboardEntry, QuizAttempt, db
from physioquiz_app.utils.time_utils import last_n_days, quiz_today, short_label

ACTIVITY_DAYS = 30
MAX_SCORE_FLOOR = 50000

SCORE_RANGES = (
    ('0-10k', 0, 10000),
    ('10k-20k', 10000, 20000),
    ('20k-30k', 20000, 30000),
    ('30k-40k', 30000, 40000),
    ('40k+', 40000, None),
)

SCORE_COLORS = {
    '0-10k': '#ef4444',
    '10k-20k': '#f97316',
    '20k-30k': '#eab308',
    '30k-40k': '#22c55e',
    '40k+': '#10b981',
}


class AnalyticsService:

    @staticmethod
    def get_dashboard(today=None) -> Dict[str, Any]:
        """KPIs plus both chart series in one call."""
        scores = [row.score or 0 for row in db.session.query(QuizAttempt.score).all()]
        return {
            'kpis': AnalyticsService.get_kpis(scores),
            'activity': AnalyticsService.get_activity(today=today),
            'score_distribution': AnalyticsService.get_score_distribution(scores),
        }

    @staticmethod
    def get_kpis(scores: Optional[List[int]] = None) -> Dict[str, Any]:
        if scores is None:
            scores = [row.score or 0 for row in db.session.query(QuizAttempt.score).all()]

        total_users = db.session.query(func.count(func.distinct(LeaderboardEntry.username))).scalar() or 0
        total_attempts = len(scores)

        avg_score = round(sum(scores) / total_attempts) if total_attempts else 0
        max_score = max(scores + [MAX_SCORE_FLOOR])

        with_score = len([score for score in scores if score > 0])
        completion_rate = round(with_score / total_attempts * 100) if total_attempts else 0

        return {
            'total_users': total_users,
            'total_attempts': total_attempts,
            'avg_score': avg_score,
            'max_score': max_score,
            'completion_rate': completion_rate,
        }

    @staticmethod
    def get_activity(days: int = ACTIVITY_DAYS, today=None) -> List[Dict[str, Any]]:
        """Attempts per day, oldest first, with every day present."""
        today = today or quiz_today()
        window = last_n_days(days, end=today)
        # created_at is stored as UTC; SQLite hands it back naive.
        start = datetime.combine(window[0], time.min)
        end = datetime.combine(today + timedelta(days=1), time.min)

        counts = {day: 0 for day in window}
        rows = (
            db.session.query(QuizAttempt.created_at)
            .filter(QuizAttempt.created_at >= start)
            .filter(QuizAttempt.created_at < end)
            .all()
        )
        for (created_at,) in rows:
            if created_at is None:
                continue
            day = created_at.date()
            if day in counts:
                counts[day] += 1

        return [
            {'date': short_label(day), 'iso_date': day.isoformat(), 'attempts': counts[day]}
            for day in window
        ]

    @staticmethod
    def get_score_distribution(scores: Optional[List[int]] = None) -> List[Dict[str, Any]]:
        if scores is None:
            scores = [row.score or 0 for row in db.session.query(QuizAttempt.score).all()]
        distribution = []
        for label, low, high in SCORE_RANGES:
            count = len([s for s in scores if s >= low and (high is None or s < high)])
            distribution.append({'range': label, 'count': count, 'color': SCORE_COLORS[label]})
        return distribution
