"""
Leaderboard Service
Pushes locally recorded daily scores to the per-user ledger and reads the
career totals the ledger roll-up maintains.
"""
from typing import Any, Dict, List, Mapping, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from physioquiz_app.models import LeaderboardEntry, QuizHistory, db
from physioquiz_app.modules.quiz.logics.scoring import ScoringEngine
from physioquiz_app.utils.time_utils import parse_date

AVATARS = [
    '/static/avatars/user1.svg',
    '/static/avatars/user2.svg',
    '/static/avatars/user3.svg',
    '/static/avatars/user4.svg',
    '/static/avatars/user5.svg',
]

# SQLSTATE for unique_violation on PostgreSQL; SQLite reports it in the message.
UNIQUE_VIOLATION_PGCODE = '23505'


def avatar_for_rank(rank: int) -> str:
    """Rank-based avatar, so the first five places never share one."""
    return AVATARS[rank % len(AVATARS)]


def is_unique_violation(error: IntegrityError) -> bool:
    orig = getattr(error, 'orig', None)
    if getattr(orig, 'pgcode', None) == UNIQUE_VIOLATION_PGCODE:
        return True
    message = str(orig or error).lower()
    return 'unique constraint' in message or 'duplicate key' in message


class LeaderboardService:

    @staticmethod
    def sync_local_scores(user, history: Mapping[str, int]) -> Dict[str, List[str]]:
        """
        Insert one ledger row per (date, score) in `history`.

        Dates already on the ledger are rejected by the (user, date) unique
        constraint and counted as skipped. Other failures are logged and
        reported as failed.
        """
        result = {'inserted': [], 'skipped': [], 'failed': []}
        if user is None or not getattr(user, 'is_authenticated', False):
            return result

        for quiz_date, score in sorted((history or {}).items()):
            if parse_date(quiz_date) is None:
                result['failed'].append(quiz_date)
                continue
            try:
                db.session.add(QuizHistory(user_id=user.user_id, quiz_date=quiz_date, score=int(score)))
                db.session.commit()
                result['inserted'].append(quiz_date)
            except IntegrityError as e:
                db.session.rollback()
                if is_unique_violation(e):
                    result['skipped'].append(quiz_date)
                else:
                    current_app.logger.error(f"Ledger insert failed for user {user.user_id} on {quiz_date}: {e}")
                    result['failed'].append(quiz_date)
            except (SQLAlchemyError, TypeError, ValueError) as e:
                db.session.rollback()
                current_app.logger.error(f"Ledger insert failed for user {user.user_id} on {quiz_date}: {e}")
                result['failed'].append(quiz_date)

        if result['inserted']:
            current_app.logger.info(
                f"Synced {len(result['inserted'])} daily score(s) for user {user.user_id}; "
                f"{len(result['skipped'])} already on the ledger."
            )
        return result

    @staticmethod
    def get_entry(user_id: int) -> Optional[LeaderboardEntry]:
        return db.session.get(LeaderboardEntry, user_id)

    @staticmethod
    def career_total(user, history: Optional[Mapping[str, int]] = None) -> Dict[str, Any]:
        """
        Authoritative total for signed-in users; the local history sum is
        only a fallback for anonymous players.
        """
        if user is not None and getattr(user, 'is_authenticated', False):
            entry = LeaderboardService.get_entry(user.user_id)
            total = entry.total_score if entry else 0
            return {
                'total_score': total,
                'display_points': ScoringEngine.display_points(total),
                'games_played': entry.games_played if entry else 0,
                'source': 'remote',
            }

        history = history or {}
        total = sum(int(score) for score in history.values())
        return {
            'total_score': total,
            'display_points': ScoringEngine.display_points(total),
            'games_played': len(history),
            'source': 'local',
        }

    @staticmethod
    def get_leaderboard(limit: int = 50, viewer_user=None) -> List[Dict[str, Any]]:
        """Top entries by career total."""
        rows = (
            LeaderboardEntry.query
            .order_by(LeaderboardEntry.total_score.desc(), LeaderboardEntry.last_played_at.asc())
            .limit(limit)
            .all()
        )
        viewer_id = viewer_user.user_id if viewer_user is not None and getattr(viewer_user, 'is_authenticated', False) else None

        leaderboard = []
        for idx, row in enumerate(rows):
            leaderboard.append({
                'rank': idx + 1,
                'user_id': row.user_id,
                'username': row.username,
                'avatar_url': row.avatar_url or avatar_for_rank(idx),
                'total_score': row.total_score,
                'display_points': ScoringEngine.display_points(row.total_score),
                'games_played': row.games_played,
                'last_played_at': row.last_played_at.isoformat() if row.last_played_at else None,
                'is_current_user': row.user_id == viewer_id,
            })
        return leaderboard
