import io
import random
from datetime import date

import pandas as pd
import pytest

from physioquiz_app.modules.admin.logics.question_parser import (
    QuestionParseError,
    parse_excel,
    parse_study_text,
    schedule_questions,
)

STUDY_TEXT = """
Q: A patient 3 days post-CABG reports sternal clicking during coughing.
What is the priority action?
Options:
A) Encourage log-rolling
B) Apply sternal counter-pressure with a pillow
C) Stop therapy and notify the surgeon
D) Continue as planned
Answer: C
---
Q: Which finding suggests orthostatic intolerance?
Options:
A) HR rise of 5 bpm
B) SBP drop of 25 mmHg
C) SpO2 of 97%
---
Q: Missing options block
Options:
A) Only one
"""


def test_parse_study_text_reads_blocks():
    questions = parse_study_text(STUDY_TEXT, rng=random.Random(1))
    assert len(questions) == 2

    first = questions[0]
    assert first.question.startswith('A patient 3 days post-CABG')
    assert 'What is the priority action?' in first.question
    assert [option.id for option in first.options] == ['a', 'b', 'c', 'd']
    assert first.correct_id == 'c'


def test_missing_answer_line_picks_an_existing_option():
    questions = parse_study_text(STUDY_TEXT, rng=random.Random(7))
    assert questions[1].correct_id in {'a', 'b', 'c'}
    assert len(questions[1].options) == 3


def test_schedule_questions_fills_days_in_order():
    questions = parse_study_text(STUDY_TEXT, rng=random.Random(1)) * 3
    scheduled = schedule_questions(questions, date(2025, 11, 30), per_day=4)
    assert [q.date for q in scheduled] == ['2025-11-30'] * 4 + ['2025-12-01'] * 2
    assert questions[0].date is None


def test_parse_excel_sheet():
    frame = pd.DataFrame([
        {'question': 'Q1', 'option_a': 'x', 'option_b': 'y', 'option_c': None, 'option_d': None, 'correct_id': 'A'},
        {'question': 'Q2', 'option_a': 'x', 'option_b': None, 'option_c': None, 'option_d': None, 'correct_id': 'a'},
    ])
    buffer = io.BytesIO()
    frame.to_excel(buffer, index=False, engine='openpyxl')
    buffer.seek(0)

    questions = parse_excel(buffer)
    assert len(questions) == 1
    assert questions[0].correct_id == 'a'


def test_parse_excel_reports_missing_columns():
    buffer = io.BytesIO()
    pd.DataFrame([{'question': 'Q1'}]).to_excel(buffer, index=False, engine='openpyxl')
    buffer.seek(0)
    with pytest.raises(QuestionParseError):
        parse_excel(buffer)
