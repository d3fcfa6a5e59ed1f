"""Daily quiz module: the quiz page, session API and scoring."""

from flask import Blueprint

quiz_bp = Blueprint('quiz', __name__)
quiz_api_bp = Blueprint('quiz_api', __name__)

module_metadata = {
    'name': 'Daily Quiz',
    'icon': 'circle-question',
    'category': 'Play',
    'url_prefix': '/',
    'enabled': True
}

from .routes import views, api  # noqa: E402,F401
