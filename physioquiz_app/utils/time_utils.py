"""
Centralized Utilities for Time Handling in PhysioQuiz.
Goal: UTC storage, and one calendar (QUIZ_TIMEZONE) deciding which quiz is "today".
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytz
from flask import current_app, has_app_context

DATE_FORMAT = '%Y-%m-%d'


def utcnow() -> datetime:
    """
    Get the current timezone-aware UTC datetime.
    Always use this instead of datetime.utcnow() or datetime.now().
    """
    return datetime.now(timezone.utc)


def _quiz_timezone():
    tz_name = 'UTC'
    if has_app_context():
        tz_name = current_app.config.get('QUIZ_TIMEZONE', 'UTC')
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def quiz_today(now: Optional[datetime] = None) -> date:
    """Calendar date of the current daily quiz in the configured quiz timezone."""
    now = now or utcnow()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(_quiz_timezone()).date()


def today_str(now: Optional[datetime] = None) -> str:
    return quiz_today(now).strftime(DATE_FORMAT)


def parse_date(value) -> Optional[date]:
    """Parse a YYYY-MM-DD string (or pass a date through). Returns None when invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def last_n_days(n: int, end: Optional[date] = None) -> list:
    """The n calendar dates ending at `end` (inclusive), oldest first."""
    end = end or quiz_today()
    return [end - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def short_label(value: date) -> str:
    """Chart label in the 'Nov 29' style."""
    return f"{value.strftime('%b')} {value.day}"
