"""
Question file parsing for bulk import.

Pure logic: turns a study text file or an Excel sheet into validated
QuestionContent objects and spreads them over consecutive days.

Study text format (blocks separated by a line of '---'):

    Q: A patient 3 days post-CABG reports sternal clicking ...
    Options:
    A) Encourage use of log-rolling technique
    B) Apply sternal counter-pressure with a pillow
    C) Discontinue therapy and notify the surgeon
    Answer: C

The Answer line is optional; without it a random option is marked correct.
"""

from __future__ import annotations

import random
import re
from datetime import date, timedelta
from typing import IO, List, Optional, Sequence

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from physioquiz_app.schemas import OPTION_IDS, QuestionContent
from physioquiz_app.utils.time_utils import format_date

_QUESTION_RE = re.compile(r'Q:\s*([\s\S]*?)(?=Options:)', re.IGNORECASE)
_ANSWER_RE = re.compile(r'^\s*Answer:\s*([A-Da-d])\b', re.IGNORECASE | re.MULTILINE)
_OPTION_RES = {
    option_id: re.compile(rf'^\s*{option_id.upper()}\)\s*(.+)$', re.MULTILINE)
    for option_id in OPTION_IDS
}


class QuestionParseError(ValueError):
    """Raised when an import file cannot be read at all."""


def parse_study_text(content: str, rng: Optional[random.Random] = None) -> List[QuestionContent]:
    """Parse study-format text. Blocks missing a question or options A-C are skipped."""
    rng = rng or random.Random()
    questions: List[QuestionContent] = []

    for block in (part.strip() for part in content.split('---')):
        if not block:
            continue
        question_match = _QUESTION_RE.search(block)
        if not question_match:
            continue
        question_text = ' '.join(question_match.group(1).split())

        options = []
        for option_id in OPTION_IDS:
            match = _OPTION_RES[option_id].search(block)
            if match:
                options.append({'id': option_id, 'text': match.group(1).strip()})
        if len({option['id'] for option in options} & {'a', 'b', 'c'}) < 3:
            continue

        answer_match = _ANSWER_RE.search(block)
        if answer_match:
            correct_id = answer_match.group(1).lower()
        else:
            correct_id = rng.choice([option['id'] for option in options])

        try:
            questions.append(QuestionContent(question=question_text, options=options, correct_id=correct_id))
        except PydanticValidationError:
            continue

    return questions


def parse_excel(stream: IO) -> List[QuestionContent]:
    """Parse an .xlsx sheet with columns question, option_a..option_d, correct_id."""
    try:
        df = pd.read_excel(stream, engine='openpyxl')
    except Exception as e:
        raise QuestionParseError(f'Could not read the Excel file: {e}') from e

    df.columns = [str(column).strip().lower() for column in df.columns]
    answer_column = 'correct_id' if 'correct_id' in df.columns else 'correct_answer'
    required = ['question', 'option_a', 'option_b', answer_column]
    missing = [column for column in required if column not in df.columns]
    if missing:
        raise QuestionParseError(f"Missing column(s): {', '.join(missing)}")

    questions: List[QuestionContent] = []
    for _, row in df.iterrows():
        options = []
        for option_id in OPTION_IDS:
            value = row.get(f'option_{option_id}')
            if value is not None and not pd.isna(value) and str(value).strip():
                options.append({'id': option_id, 'text': str(value).strip()})
        question = row.get('question')
        answer = row.get(answer_column)
        if question is None or pd.isna(question) or answer is None or pd.isna(answer):
            continue
        try:
            questions.append(QuestionContent(question=str(question), options=options, correct_id=str(answer)))
        except PydanticValidationError:
            continue
    return questions


def schedule_questions(questions: Sequence[QuestionContent], start_date: date, per_day: int) -> List[QuestionContent]:
    """Assign dates: the first `per_day` questions to start_date, the next batch to the day after, ..."""
    per_day = max(1, int(per_day))
    scheduled = []
    for position, question in enumerate(questions):
        quiz_date = start_date + timedelta(days=position // per_day)
        scheduled.append(question.model_copy(update={'date': format_date(quiz_date)}))
    return scheduled
