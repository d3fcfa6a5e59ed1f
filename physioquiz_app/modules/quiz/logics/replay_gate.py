# File: physioquiz_app/modules/quiz/logics/replay_gate.py
# Per-browser "one attempt per day" gate plus the in-progress checkpoint.
# Both live in the signed session cookie, so clearing cookies resets them.

from __future__ import annotations

from typing import Dict, MutableMapping, Optional

from flask import session

from ..config import QuizConfig


class ReplayGate:
    """
    Score-history map (date -> final score) and a single checkpoint
    {date, index, score} for the daily quiz in progress.
    """

    def __init__(self, store: Optional[MutableMapping] = None):
        self._store = store if store is not None else session

    # ------------------------------------------------------------------
    # Score history
    # ------------------------------------------------------------------
    def history(self) -> Dict[str, int]:
        raw = self._store.get(QuizConfig.HISTORY_KEY)
        if not isinstance(raw, dict):
            return {}
        cleaned = {}
        for quiz_date, score in raw.items():
            try:
                cleaned[str(quiz_date)] = int(score)
            except (TypeError, ValueError):
                continue
        return cleaned

    def has_played(self, quiz_date: str) -> bool:
        return quiz_date in self.history()

    def score_for(self, quiz_date: str) -> Optional[int]:
        return self.history().get(quiz_date)

    def record_score(self, quiz_date: str, score: int) -> None:
        history = self.history()
        history[quiz_date] = int(score)
        self._store[QuizConfig.HISTORY_KEY] = history

    def local_total(self) -> int:
        return sum(self.history().values())

    # ------------------------------------------------------------------
    # Checkpoint
    # ------------------------------------------------------------------
    def load_checkpoint(self, quiz_date: str) -> Optional[dict]:
        """Checkpoint for `quiz_date`, or None if missing, stale or malformed."""
        raw = self._store.get(QuizConfig.CHECKPOINT_KEY)
        if not isinstance(raw, dict) or raw.get('date') != quiz_date:
            return None
        try:
            index = int(raw.get('index', 0))
            score = int(raw.get('score', 0))
        except (TypeError, ValueError):
            return None
        if index < 0 or score < 0:
            return None
        return {'date': quiz_date, 'index': index, 'score': score}

    def save_checkpoint(self, quiz_date: str, index: int, score: int) -> None:
        self._store[QuizConfig.CHECKPOINT_KEY] = {
            'date': quiz_date,
            'index': int(index),
            'score': int(score),
        }

    def clear_checkpoint(self) -> None:
        self._store.pop(QuizConfig.CHECKPOINT_KEY, None)
