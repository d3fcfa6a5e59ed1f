"""
Central Signal Registry for Event-Driven Architecture.

Uses Flask's built-in blinker integration to enable decoupled
communication between modules.

Usage:
    # Publisher (sender)
    from physioquiz_app.core.signals import quiz_completed
    quiz_completed.send(None, quiz_date='2025-11-29', score=50500, ...)

    # Subscriber (receiver) - in module's events.py
    @quiz_completed.connect
    def on_quiz_completed(sender, **kwargs):
        ...
"""
from blinker import Namespace

quiz_signals = Namespace()

# Signal: Fired when a daily quiz session finishes (practice sessions do not fire it)
# Payload: quiz_date, score, user_id (None for anonymous players)
quiz_completed = quiz_signals.signal('quiz_completed')

# ============================================
# Change feed
# ============================================
data_signals = Namespace()

# Signal: Fired after a commit that touched a watched table
# Payload: table (str), version (int)
table_changed = data_signals.signal('table_changed')
