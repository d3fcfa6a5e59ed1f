"""
Event handlers for the Leaderboard module.

Signing in pushes this browser's recorded daily scores to the user's ledger,
and a signed-in player's finished daily quiz goes straight onto it.
"""
from flask import current_app
from flask_login import current_user, user_logged_in

from physioquiz_app.core.signals import quiz_completed
from physioquiz_app.modules.quiz.logics.replay_gate import ReplayGate


@user_logged_in.connect
def on_user_logged_in(sender, user, **kwargs):
    from .services.leaderboard_service import LeaderboardService

    history = ReplayGate().history()
    if not history:
        return
    current_app.logger.debug(f"Reconciling {len(history)} local score(s) for user {user.user_id}.")
    LeaderboardService.sync_local_scores(user, history)


@quiz_completed.connect
def on_quiz_completed(sender, quiz_date=None, score=None, user_id=None, **kwargs):
    # Anonymous scores wait in the replay gate until the next sign-in.
    if user_id is None or not current_user.is_authenticated or current_user.user_id != user_id:
        return
    from .services.leaderboard_service import LeaderboardService

    LeaderboardService.sync_local_scores(current_user, {quiz_date: score})
