"""
Scoring Engine - Speed-bonus points for daily quiz answers.

Pure logic: no database or request access, only the inputs given.

A correct answer earns a fixed base plus a speed bonus that decays with the
time elapsed since the question was shown, floored at zero. A wrong answer
earns nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import QuizConfig


@dataclass
class ScoreResult:
    """Result of a scoring calculation."""
    base_points: int
    bonus_points: int
    total_points: int
    breakdown: dict[str, int]
    elapsed_ms: int


class ScoringEngine:
    """
    Pure calculation engine for quiz scoring.
    All methods are static and use only provided inputs.
    """

    @staticmethod
    def speed_bonus(
        elapsed_ms: float,
        bonus_max: int = QuizConfig.SPEED_BONUS_MAX,
        decay_per_ms: float = QuizConfig.SPEED_BONUS_DECAY_PER_MS,
    ) -> int:
        """Bonus left after `elapsed_ms`; never negative."""
        elapsed_ms = max(0.0, float(elapsed_ms or 0))
        return max(0, int(bonus_max - elapsed_ms * decay_per_ms))

    @staticmethod
    def calculate_answer_points(
        is_correct: bool,
        elapsed_ms: float,
        base_points: int = QuizConfig.BASE_POINTS,
        bonus_max: int = QuizConfig.SPEED_BONUS_MAX,
        decay_per_ms: float = QuizConfig.SPEED_BONUS_DECAY_PER_MS,
    ) -> ScoreResult:
        """
        Points for one answer.

        Args:
            is_correct: Whether the selected option matches the answer key
            elapsed_ms: Wall-clock time since the question was presented
            base_points: Fixed award for a correct answer
            bonus_max: Speed bonus at zero elapsed time
            decay_per_ms: Bonus points lost per elapsed millisecond

        Returns:
            ScoreResult with breakdown of points earned
        """
        elapsed = max(0, int(elapsed_ms or 0))
        if not is_correct:
            return ScoreResult(
                base_points=0,
                bonus_points=0,
                total_points=0,
                breakdown={'base': 0, 'speed_bonus': 0},
                elapsed_ms=elapsed,
            )

        bonus = ScoringEngine.speed_bonus(elapsed, bonus_max, decay_per_ms)
        return ScoreResult(
            base_points=base_points,
            bonus_points=bonus,
            total_points=base_points + bonus,
            breakdown={'base': base_points, 'speed_bonus': bonus},
            elapsed_ms=elapsed,
        )

    @staticmethod
    def display_points(score: Optional[int]) -> int:
        """Raw score shown to players in thousands, rounded down."""
        return int(score or 0) // 1000

    @staticmethod
    def session_total(results: Iterable[ScoreResult]) -> int:
        return sum(result.total_points for result in results)


def scoring_settings(config) -> dict:
    """Scoring keyword arguments from a Flask config mapping."""
    return {
        'base_points': int(config.get('QUIZ_BASE_POINTS', QuizConfig.BASE_POINTS)),
        'bonus_max': int(config.get('QUIZ_SPEED_BONUS_MAX', QuizConfig.SPEED_BONUS_MAX)),
        'decay_per_ms': float(config.get('QUIZ_SPEED_BONUS_DECAY_PER_MS', QuizConfig.SPEED_BONUS_DECAY_PER_MS)),
    }
