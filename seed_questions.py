# seed_questions.py
# Seeds demo cardiopulmonary questions, or imports a study-format text file.
# Usage:
#   python seed_questions.py                      # 5 demo questions per day from today
#   python seed_questions.py questions.txt 10     # import a study file, 10 per day from today

import random
import sys

from dotenv import load_dotenv

load_dotenv()

from physioquiz_app import create_app, db
from physioquiz_app.models import DailyQuestion
from physioquiz_app.modules.admin.logics.question_parser import parse_study_text, schedule_questions
from physioquiz_app.modules.admin.services.question_admin_service import QuestionAdminService
from physioquiz_app.schemas import QuestionContent
from physioquiz_app.utils.time_utils import quiz_today

DEMO_QUESTIONS = [
    {
        'question': 'Which is the most appropriate exercise intensity target in phase II cardiac rehab for a patient on beta-blockers?',
        'options': [
            {'id': 'a', 'text': 'Age-predicted maximal heart rate'},
            {'id': 'b', 'text': 'Rating of perceived exertion of 11-13 (Borg 6-20)'},
            {'id': 'c', 'text': 'Resting heart rate + 60 bpm'},
            {'id': 'd', 'text': 'SpO2 above 99%'},
        ],
        'correct_id': 'b',
    },
    {
        'question': 'Sternal precautions after median sternotomy usually restrict lifting to about:',
        'options': [
            {'id': 'a', 'text': '2-4 kg (5-10 lb)'},
            {'id': 'b', 'text': '10-15 kg'},
            {'id': 'c', 'text': 'No restriction'},
            {'id': 'd', 'text': 'Body weight'},
        ],
        'correct_id': 'a',
    },
    {
        'question': 'Which airway clearance technique uses a series of huffs at different lung volumes?',
        'options': [
            {'id': 'a', 'text': 'Incentive spirometry'},
            {'id': 'b', 'text': 'Active cycle of breathing technique'},
            {'id': 'c', 'text': 'Pursed-lip breathing'},
            {'id': 'd', 'text': 'Diaphragmatic breathing'},
        ],
        'correct_id': 'b',
    },
    {
        'question': 'A 6-minute walk test should be stopped immediately if the patient develops:',
        'options': [
            {'id': 'a', 'text': 'Mild leg fatigue'},
            {'id': 'b', 'text': 'Chest pain'},
            {'id': 'c', 'text': 'RPE of 12'},
            {'id': 'd', 'text': 'HR increase of 20 bpm'},
        ],
        'correct_id': 'b',
    },
    {
        'question': 'Which position best improves V/Q matching in unilateral lung disease?',
        'options': [
            {'id': 'a', 'text': 'Good lung down'},
            {'id': 'b', 'text': 'Bad lung down'},
            {'id': 'c', 'text': 'Supine flat'},
            {'id': 'd', 'text': 'Trendelenburg'},
        ],
        'correct_id': 'a',
    },
]


def seed_demo(days=3):
    start = quiz_today()
    contents = []
    for _ in range(days):
        for item in DEMO_QUESTIONS:
            contents.append(QuestionContent(**item))
    return schedule_questions(contents, start, per_day=len(DEMO_QUESTIONS))


def main(argv):
    app = create_app()
    with app.app_context():
        if len(argv) > 1:
            with open(argv[1], encoding='utf-8') as handle:
                parsed = parse_study_text(handle.read(), rng=random.Random())
            per_day = int(argv[2]) if len(argv) > 2 else app.config.get('IMPORT_QUESTIONS_PER_DAY', 10)
            scheduled = schedule_questions(parsed, quiz_today(), per_day)
        else:
            if DailyQuestion.query.filter(DailyQuestion.quiz_date >= quiz_today().isoformat()).count():
                print("Upcoming questions already exist. Skipping demo seed.")
                return
            scheduled = seed_demo()

        if not scheduled:
            print("No questions to add.")
            return
        count = QuestionAdminService.bulk_create(scheduled)
        print(f"Added {count} question(s) from {scheduled[0].date} to {scheduled[-1].date}.")
        db.session.remove()


if __name__ == '__main__':
    main(sys.argv)
