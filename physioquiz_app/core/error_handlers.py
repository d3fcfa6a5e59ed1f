"""
Error Handlers for PhysioQuiz

Quiz, leaderboard and admin code raise PhysioQuizError subclasses; the JSON
endpoints turn them into {success: false, message, code, details} bodies that
quiz.js and the admin editor read. Unknown /api/ URLs and crashes get the
same shape instead of an HTML error page.
"""

from flask import jsonify, request, current_app
from typing import Optional, Dict, Any


class PhysioQuizError(Exception):
    """A failure the player or editor should see, with its HTTP status and a stable code."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Body returned by the JSON API."""
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details
        }


class NotFoundError(PhysioQuizError):
    """A question, user or watched table that does not exist (404)."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(PhysioQuizError):
    """Rejected input: unknown answer option, malformed question or bad date (400)."""

    def __init__(self, message: str = 'Validation failed', errors: Dict = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


class AuthorizationError(PhysioQuizError):
    """A signed-in player reaching the admin API (403)."""

    def __init__(self, message: str = 'Access denied'):
        super().__init__(
            message=message,
            code='UNAUTHORIZED',
            status_code=403
        )


class QuizStateError(PhysioQuizError):
    """The quiz session is not in a state that accepts this action."""

    def __init__(self, message: str = 'Action not allowed in the current quiz state', view: str = None):
        super().__init__(
            message=message,
            code='INVALID_QUIZ_STATE',
            status_code=409,
            details={'view': view} if view else None
        )


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """JSON error body for failures raised outside the exception hierarchy."""
    response = {
        'success': False,
        'message': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def register_error_handlers(app):
    """Map PhysioQuizError and /api/ 404/500s to JSON error bodies."""

    @app.errorhandler(PhysioQuizError)
    def handle_physioquiz_error(error):
        current_app.logger.warning(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        if request.path.startswith('/api/') or '/api/' in request.path:
            return error_response('Endpoint not found', 'NOT_FOUND', 404)
        return error

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if request.path.startswith('/api/') or '/api/' in request.path:
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error
