# File: physioquiz_app/modules/quiz/config.py


class QuizConfig:
    """
    Default settings for the Quiz module. App config keys of the same name
    (prefixed with QUIZ_ where noted) override them.
    """
    BASE_POINTS = 100              # QUIZ_BASE_POINTS
    SPEED_BONUS_MAX = 10000        # QUIZ_SPEED_BONUS_MAX
    SPEED_BONUS_DECAY_PER_MS = 1   # QUIZ_SPEED_BONUS_DECAY_PER_MS
    ANSWER_REVEAL_DELAY_MS = 1500
    PRACTICE_QUESTION_LIMIT = 10

    # Flask session keys
    SESSION_KEY = 'quiz_session'
    HISTORY_KEY = 'quiz_score_history'
    CHECKPOINT_KEY = 'quiz_progress'

    MODE_DAILY = 'daily'
    MODE_PRACTICE = 'practice'
