# File: physioquiz_app/modules/quiz/logics/session_logic.py
# Daily quiz / practice session state machine, persisted in the Flask session.

from __future__ import annotations

from enum import Enum
from typing import MutableMapping, Optional

from flask import current_app, session
from flask_login import current_user

from physioquiz_app.core.error_handlers import NotFoundError, QuizStateError, ValidationError
from physioquiz_app.core.signals import quiz_completed
from physioquiz_app.utils.time_utils import today_str, utcnow

from ..config import QuizConfig
from ..services.attempt_service import AttemptService
from ..services.question_service import QuestionService
from .replay_gate import ReplayGate
from .scoring import ScoringEngine, scoring_settings


class QuizView(str, Enum):
    LOADING = 'LOADING'
    QUIZ = 'QUIZ'
    COMPLETED = 'COMPLETED'
    ALREADY_PLAYED = 'ALREADY_PLAYED'
    NO_QUIZ = 'NO_QUIZ'
    PRACTICE = 'PRACTICE'
    PRACTICE_COMPLETED = 'PRACTICE_COMPLETED'


PLAYING_VIEWS = (QuizView.QUIZ, QuizView.PRACTICE)


class QuizSessionManager:
    """
    Drives one player's quiz: a cursor over a fixed list of question ids,
    a running score, and the option locked for the current question.

    The live state is kept under SESSION_KEY. Daily sessions also mirror
    progress into the replay gate so a reload resumes where it stopped.
    """
    SESSION_KEY = QuizConfig.SESSION_KEY

    def __init__(self, view=QuizView.LOADING, mode=None, quiz_date=None, question_ids=None,
                 index=0, score=0, selected_option=None, last_points=None,
                 question_started_at=None, answers=None, *, store: Optional[MutableMapping] = None):
        self.view = QuizView(view)
        self.mode = mode
        self.quiz_date = quiz_date
        self.question_ids = list(question_ids or [])
        self.index = index or 0
        self.score = score or 0
        self.selected_option = selected_option
        self.last_points = last_points
        self.question_started_at = question_started_at
        self.answers = list(answers or [])
        self._store = store if store is not None else session
        self.gate = ReplayGate(self._store)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data, store=None):
        try:
            view = QuizView(data.get('view', QuizView.LOADING))
        except ValueError:
            view = QuizView.LOADING
        return cls(
            view=view,
            mode=data.get('mode'),
            quiz_date=data.get('quiz_date'),
            question_ids=data.get('question_ids') or [],
            index=data.get('index', 0),
            score=data.get('score', 0),
            selected_option=data.get('selected_option'),
            last_points=data.get('last_points'),
            question_started_at=data.get('question_started_at'),
            answers=data.get('answers') or [],
            store=store,
        )

    def to_dict(self):
        return {
            'view': self.view.value,
            'mode': self.mode,
            'quiz_date': self.quiz_date,
            'question_ids': self.question_ids,
            'index': self.index,
            'score': self.score,
            'selected_option': self.selected_option,
            'last_points': self.last_points,
            'question_started_at': self.question_started_at,
            'answers': self.answers,
        }

    @classmethod
    def load(cls, store=None):
        store = store if store is not None else session
        data = store.get(cls.SESSION_KEY)
        if isinstance(data, dict):
            return cls.from_dict(data, store=store)
        return cls(store=store)

    def save(self):
        self._store[self.SESSION_KEY] = self.to_dict()

    def reset(self):
        """Drop the live session. The replay gate is left alone."""
        self._store.pop(self.SESSION_KEY, None)
        self.view = QuizView.LOADING
        self.mode = None
        self.quiz_date = None
        self.question_ids = []
        self.index = 0
        self.score = 0
        self.selected_option = None
        self.last_points = None
        self.question_started_at = None
        self.answers = []

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def start_daily(self, today: Optional[str] = None):
        today = today or today_str()

        if self.view in PLAYING_VIEWS and self.mode == QuizConfig.MODE_DAILY and self.quiz_date == today:
            # A reload between answer and advance lands on the checkpoint, never behind it.
            if self.selected_option is not None:
                self.advance()
            return self

        recorded = self.gate.score_for(today)
        if recorded is None and current_user.is_authenticated:
            recorded = QuestionService.get_remote_score(current_user.user_id, today)
            if recorded is not None:
                self.gate.record_score(today, recorded)
        if recorded is not None:
            self._become(QuizView.ALREADY_PLAYED, QuizConfig.MODE_DAILY, today, [], score=recorded)
            current_app.logger.debug(f"Quiz {today} already played, score {recorded}.")
            return self

        questions = QuestionService.get_questions_for_date(today)
        if not questions:
            self._become(QuizView.NO_QUIZ, QuizConfig.MODE_DAILY, today, [])
            return self

        question_ids = [q.question_id for q in questions]
        checkpoint = self.gate.load_checkpoint(today)
        if checkpoint is None:
            self.gate.clear_checkpoint()
            index, score = 0, 0
        else:
            index, score = checkpoint['index'], checkpoint['score']
            current_app.logger.debug(f"Resuming quiz {today} at question {index} with score {score}.")

        self._become(QuizView.QUIZ, QuizConfig.MODE_DAILY, today, question_ids, index=index, score=score)
        if self.index >= len(self.question_ids):
            self._finish()
        else:
            self.save()
        return self

    def start_practice(self, today: Optional[str] = None, rng=None):
        today = today or today_str()
        limit = int(current_app.config.get('PRACTICE_QUESTION_LIMIT', QuizConfig.PRACTICE_QUESTION_LIMIT))
        questions = QuestionService.get_practice_questions(today, limit, rng=rng)
        if not questions:
            self._become(QuizView.NO_QUIZ, QuizConfig.MODE_PRACTICE, today, [])
            return self
        self._become(QuizView.PRACTICE, QuizConfig.MODE_PRACTICE, today,
                     [q.question_id for q in questions])
        self.save()
        return self

    def answer(self, option_id):
        """Lock in an option for the current question. Returns (manager, ignored)."""
        if self.view not in PLAYING_VIEWS:
            raise QuizStateError('There is no question to answer right now.', view=self.view.value)
        if self.selected_option is not None:
            return self, True

        question = self.current_question()
        if question is None:
            raise NotFoundError('This question is no longer available.', resource='question')

        option_id = str(option_id).strip().lower() if option_id is not None else None
        if option_id not in question.option_ids():
            raise ValidationError('Unknown answer option.', errors={'option_id': option_id})

        elapsed_ms = self._elapsed_ms()
        result = ScoringEngine.calculate_answer_points(
            is_correct=question.is_correct(option_id),
            elapsed_ms=elapsed_ms,
            **scoring_settings(current_app.config),
        )

        self.selected_option = option_id
        self.last_points = result.total_points
        self.score += result.total_points
        self.answers.append({
            'question_id': question.question_id,
            'option_id': option_id,
            'correct': question.is_correct(option_id),
            'points': result.total_points,
            'elapsed_ms': result.elapsed_ms,
        })

        if self.mode == QuizConfig.MODE_DAILY:
            self.gate.save_checkpoint(self.quiz_date, self.index + 1, self.score)

        self.save()
        return self, False

    def advance(self):
        """Move to the next question, or end the session after the last one."""
        if self.view not in PLAYING_VIEWS:
            raise QuizStateError('The quiz is not in progress.', view=self.view.value)
        if self.selected_option is None and self.current_question() is not None:
            raise QuizStateError('Answer the current question first.', view=self.view.value)

        if self.index + 1 < len(self.question_ids):
            self.index += 1
            self.selected_option = None
            self.last_points = None
            self.question_started_at = utcnow().timestamp()
            self.save()
        else:
            self._finish()
        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _become(self, view, mode, quiz_date, question_ids, index=0, score=0):
        self.view = QuizView(view)
        self.mode = mode
        self.quiz_date = quiz_date
        self.question_ids = list(question_ids)
        self.index = index
        self.score = score
        self.selected_option = None
        self.last_points = None
        self.answers = []
        self.question_started_at = utcnow().timestamp() if view in PLAYING_VIEWS else None
        if view not in PLAYING_VIEWS:
            self.save()

    def _elapsed_ms(self) -> float:
        if self.question_started_at is None:
            return 0.0
        return max(0.0, (utcnow().timestamp() - float(self.question_started_at)) * 1000.0)

    def _finish(self):
        self.selected_option = None
        self.question_started_at = None
        self.index = min(self.index, max(len(self.question_ids) - 1, 0))

        if self.mode != QuizConfig.MODE_DAILY:
            self.view = QuizView.PRACTICE_COMPLETED
            self.save()
            return

        self.view = QuizView.COMPLETED
        self.gate.record_score(self.quiz_date, self.score)
        self.gate.clear_checkpoint()
        self.save()

        AttemptService.record_attempt(self.quiz_date, self.score)

        user_id = current_user.user_id if current_user.is_authenticated else None

        current_app.logger.info(f"Daily quiz {self.quiz_date} completed with score {self.score}.")
        quiz_completed.send(
            current_app._get_current_object(),
            quiz_date=self.quiz_date,
            score=self.score,
            user_id=user_id,
        )

    def current_question(self):
        if self.view not in PLAYING_VIEWS or not self.question_ids:
            return None
        if self.index >= len(self.question_ids):
            return None
        return QuestionService.get_question(self.question_ids[self.index])

    def snapshot(self):
        """JSON-ready view of the session for the quiz page."""
        data = {
            'view': self.view.value,
            'mode': self.mode,
            'quiz_date': self.quiz_date,
            'index': self.index,
            'total_questions': len(self.question_ids),
            'score': self.score,
            'display_score': ScoringEngine.display_points(self.score),
            'selected_option': self.selected_option,
            'last_points': self.last_points,
            'reveal_delay_ms': int(current_app.config.get('ANSWER_REVEAL_DELAY_MS', QuizConfig.ANSWER_REVEAL_DELAY_MS)),
            'question': None,
        }

        question = self.current_question()
        if question is not None:
            data['question'] = question.to_public_dict()
            if self.selected_option is not None:
                data['correct_id'] = question.correct_id
                data['is_correct'] = question.is_correct(self.selected_option)

        if self.view in (QuizView.COMPLETED, QuizView.ALREADY_PLAYED):
            from physioquiz_app.modules.leaderboard.services.leaderboard_service import LeaderboardService
            data['career'] = LeaderboardService.career_total(current_user, self.gate.history())

        if self.view in (QuizView.COMPLETED, QuizView.PRACTICE_COMPLETED):
            data['answers'] = self.answers
        return data
