# File: physioquiz_app/config.py
# Application configuration, read from the environment with local defaults.

import os

# The project root is one level above the package directory.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Default SQLite database file, kept in database/ at the project root
DATABASE_PATH = os.path.join(BASE_DIR, "database", "physioquiz.db")


def _env_int(name, default):
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return int(value)


class Config:
    """
    Configuration for the Flask application.
    """
    # Secret used to sign the session cookie (which also holds the replay gate)
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'physioquiz-dev-secret-key'

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Calendar used to decide what "today's quiz" is
    QUIZ_TIMEZONE = os.environ.get('QUIZ_TIMEZONE', 'UTC')

    # Scoring
    QUIZ_BASE_POINTS = _env_int('QUIZ_BASE_POINTS', 100)
    QUIZ_SPEED_BONUS_MAX = _env_int('QUIZ_SPEED_BONUS_MAX', 10000)
    QUIZ_SPEED_BONUS_DECAY_PER_MS = _env_int('QUIZ_SPEED_BONUS_DECAY_PER_MS', 1)

    # UI pacing and limits
    ANSWER_REVEAL_DELAY_MS = _env_int('ANSWER_REVEAL_DELAY_MS', 1500)
    PRACTICE_QUESTION_LIMIT = _env_int('PRACTICE_QUESTION_LIMIT', 10)
    LEADERBOARD_LIMIT = _env_int('LEADERBOARD_LIMIT', 50)
    REALTIME_POLL_INTERVAL_MS = _env_int('REALTIME_POLL_INTERVAL_MS', 5000)
    IMPORT_QUESTIONS_PER_DAY = _env_int('IMPORT_QUESTIONS_PER_DAY', 10)

    # Default admin account created on first start
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME', 'admin')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'admin')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR')
    LOG_JSON = os.environ.get('LOG_JSON', '').lower() in ('1', 'true', 'yes')

    # Make sure the database directory exists when the app starts
    db_dir = os.path.dirname(DATABASE_PATH)
    if not os.path.exists(db_dir):
        os.makedirs(db_dir)
