# File: physioquiz_app/core/extensions.py
# Extensions shared by the quiz, leaderboard, admin and realtime modules.

import sqlite3
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_wtf import CSRFProtect
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine

# 1. Database: questions, attempts, per-user ledger and leaderboard roll-up
db = SQLAlchemy()

@event.listens_for(Engine, "connect")
def _set_sqlite_pragmas(dbapi_connection, _connection_record):
    """
    SQLite tuning for concurrent players: WAL lets the leaderboard and change
    feed read while a finished quiz is being written, and the busy timeout
    keeps ledger syncs from failing on a briefly locked database.
    """
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
        cursor.execute("PRAGMA busy_timeout=30000;")
    finally:
        cursor.close()

# 2. Login: players and admins share one account table
login_manager = LoginManager()
login_manager.login_view = "auth.login"
login_manager.login_message = "Please sign in to access this page."
login_manager.login_message_category = "info"

# 3. CSRF for forms and the quiz API header, migrations for the schema
csrf_protect = CSRFProtect()
migrate = Migrate()

__all__ = ["db", "login_manager", "csrf_protect", "migrate"]
