"""
Question Admin Service
CRUD over dated questions, date folders and search for the admin editor.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from flask import current_app

from physioquiz_app.core.error_handlers import NotFoundError, ValidationError
from physioquiz_app.models import DailyQuestion, db
from physioquiz_app.schemas import QuestionContent
from physioquiz_app.utils.time_utils import format_date, parse_date, today_str


class QuestionAdminService:

    @staticmethod
    def list_questions(search: Optional[str] = None) -> List[DailyQuestion]:
        """All questions, newest date first, optionally filtered by search text."""
        questions = (
            DailyQuestion.query
            .order_by(DailyQuestion.quiz_date.desc(), DailyQuestion.question_id.asc())
            .all()
        )
        return QuestionAdminService.filter_questions(questions, search)

    @staticmethod
    def filter_questions(questions: Iterable[DailyQuestion], search: Optional[str]) -> List[DailyQuestion]:
        """Case-insensitive substring match over question text and the date string."""
        term = (search or '').strip().lower()
        if not term:
            return list(questions)
        return [
            q for q in questions
            if term in (q.question or '').lower() or term in (q.quiz_date or '').lower()
        ]

    @staticmethod
    def group_by_date(questions: Iterable[DailyQuestion], today: Optional[str] = None) -> List[Dict[str, Any]]:
        """Date folders, newest first, each with its questions in id order."""
        today = today or today_str()
        folders: "OrderedDict[str, List[DailyQuestion]]" = OrderedDict()
        for question in sorted(questions, key=lambda q: (q.quiz_date, q.question_id)):
            folders.setdefault(question.quiz_date, []).append(question)

        result = []
        for quiz_date in sorted(folders.keys(), reverse=True):
            items = folders[quiz_date]
            result.append({
                'date': quiz_date,
                'questions': items,
                'count': len(items),
                'is_today': quiz_date == today,
                'is_past': quiz_date < today,
                'is_upcoming': quiz_date > today,
            })
        return result

    @staticmethod
    def get_question(question_id: int) -> DailyQuestion:
        question = db.session.get(DailyQuestion, question_id)
        if question is None:
            raise NotFoundError(f'Question {question_id} not found.', resource='question')
        return question

    @staticmethod
    def create_question(content: QuestionContent) -> DailyQuestion:
        quiz_date = QuestionAdminService._require_date(content.date)
        question = DailyQuestion(
            question=content.question,
            options=content.options_json(),
            correct_id=content.correct_id,
            quiz_date=quiz_date,
        )
        db.session.add(question)
        db.session.commit()
        current_app.logger.info(f"Created question {question.question_id} for {quiz_date}.")
        return question

    @staticmethod
    def update_question(question_id: int, content: QuestionContent) -> DailyQuestion:
        question = QuestionAdminService.get_question(question_id)
        question.question = content.question
        question.options = content.options_json()
        question.correct_id = content.correct_id
        if content.date:
            question.quiz_date = QuestionAdminService._require_date(content.date)
        db.session.commit()
        current_app.logger.info(f"Updated question {question_id}.")
        return question

    @staticmethod
    def reassign_date(question_id: int, new_date) -> DailyQuestion:
        """Move one question into another date folder."""
        question = QuestionAdminService.get_question(question_id)
        old_date = question.quiz_date
        question.quiz_date = QuestionAdminService._require_date(new_date)
        db.session.commit()
        current_app.logger.info(f"Moved question {question_id} from {old_date} to {question.quiz_date}.")
        return question

    @staticmethod
    def delete_question(question_id: int) -> None:
        question = QuestionAdminService.get_question(question_id)
        db.session.delete(question)
        db.session.commit()
        current_app.logger.info(f"Deleted question {question_id}.")

    @staticmethod
    def bulk_create(contents: Iterable[QuestionContent]) -> int:
        """Insert already-dated questions in one transaction."""
        count = 0
        for content in contents:
            db.session.add(DailyQuestion(
                question=content.question,
                options=content.options_json(),
                correct_id=content.correct_id,
                quiz_date=QuestionAdminService._require_date(content.date),
            ))
            count += 1
        db.session.commit()
        current_app.logger.info(f"Imported {count} question(s).")
        return count

    @staticmethod
    def _require_date(value) -> str:
        parsed = parse_date(value)
        if parsed is None:
            raise ValidationError('A valid date (YYYY-MM-DD) is required.', errors={'date': value})
        return format_date(parsed)
