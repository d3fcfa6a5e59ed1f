from flask import current_app, render_template

from .. import quiz_bp
from ..config import QuizConfig


@quiz_bp.route('/')
def index():
    """Quiz page. The state machine itself is driven through the JSON API."""
    return render_template(
        'quiz/index.html',
        reveal_delay_ms=current_app.config.get('ANSWER_REVEAL_DELAY_MS', QuizConfig.ANSWER_REVEAL_DELAY_MS),
    )


@quiz_bp.route('/vault')
def vault():
    """Practice mode entry ("The Vault")."""
    return render_template(
        'quiz/index.html',
        practice=True,
        reveal_delay_ms=current_app.config.get('ANSWER_REVEAL_DELAY_MS', QuizConfig.ANSWER_REVEAL_DELAY_MS),
    )
