"""Career leaderboard and ledger reconciliation."""

from flask import Blueprint

leaderboard_bp = Blueprint('leaderboard', __name__)

module_metadata = {
    'name': 'Leaderboard',
    'icon': 'trophy',
    'category': 'Play',
    'url_prefix': '/leaderboard',
    'enabled': True
}

from . import routes, events  # noqa: E402,F401
