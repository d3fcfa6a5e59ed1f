from functools import wraps

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from physioquiz_app.core.error_handlers import error_response
from physioquiz_app.models import db

from .. import quiz_api_bp
from ..logics.session_logic import QuizSessionManager


def _db_errors_as_json(view):
    """Backend failures leave the session untouched and report an error."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Quiz API database error in {view.__name__}: {e}", exc_info=True)
            return error_response('The quiz service is unavailable, please try again.', 'BACKEND_ERROR', 503)
    return wrapper


@quiz_api_bp.route('/state', methods=['GET'])
@_db_errors_as_json
def get_state():
    manager = QuizSessionManager.load()
    return jsonify({'success': True, 'state': manager.snapshot()})


@quiz_api_bp.route('/start', methods=['POST'])
@_db_errors_as_json
def start_daily():
    manager = QuizSessionManager.load()
    manager.start_daily()
    return jsonify({'success': True, 'state': manager.snapshot()})


@quiz_api_bp.route('/practice', methods=['POST'])
@_db_errors_as_json
def start_practice():
    manager = QuizSessionManager.load()
    manager.start_practice()
    return jsonify({'success': True, 'state': manager.snapshot()})


@quiz_api_bp.route('/answer', methods=['POST'])
@_db_errors_as_json
def answer():
    payload = request.get_json(silent=True) or {}
    option_id = payload.get('option_id', request.form.get('option_id'))
    if option_id is None or str(option_id).strip() == '':
        return error_response('option_id is required.', 'VALIDATION_ERROR', 400)

    manager = QuizSessionManager.load()
    manager, ignored = manager.answer(option_id)
    return jsonify({'success': True, 'ignored': ignored, 'state': manager.snapshot()})


@quiz_api_bp.route('/advance', methods=['POST'])
@_db_errors_as_json
def advance():
    manager = QuizSessionManager.load()
    manager.advance()
    return jsonify({'success': True, 'state': manager.snapshot()})


@quiz_api_bp.route('/reset', methods=['POST'])
def reset():
    manager = QuizSessionManager.load()
    manager.reset()
    return jsonify({'success': True, 'state': manager.snapshot()})
