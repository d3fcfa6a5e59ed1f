from flask import current_app, jsonify, render_template, request
from flask_login import current_user

from physioquiz_app.modules.quiz.logics.replay_gate import ReplayGate

from . import leaderboard_bp
from .services.leaderboard_service import LeaderboardService


@leaderboard_bp.route('/')
def leaderboard_ui():
    """Career leaderboard page."""
    return render_template('leaderboard/index.html')


@leaderboard_bp.route('/api/entries', methods=['GET'])
def get_leaderboard_api():
    """Leaderboard rows, highest career total first."""
    default_limit = current_app.config.get('LEADERBOARD_LIMIT', 50)
    limit = request.args.get('limit', default_limit, type=int)
    limit = max(1, min(limit or default_limit, 200))

    data = LeaderboardService.get_leaderboard(limit=limit, viewer_user=current_user)
    return jsonify({
        'success': True,
        'leaderboard': data,
        'count': len(data),
    })


@leaderboard_bp.route('/api/me', methods=['GET'])
def get_my_total_api():
    """Career total of the viewer: ledger value when signed in, local history otherwise."""
    history = ReplayGate().history()
    return jsonify({
        'success': True,
        'career': LeaderboardService.career_total(current_user, history),
        'history': history,
    })
