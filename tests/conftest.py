import os
import sys
from datetime import datetime, timezone

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from physioquiz_app import create_app, db
from physioquiz_app.config import Config
from physioquiz_app.models import DailyQuestion, User
from physioquiz_app.utils.time_utils import today_str


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    LOG_DIR = None
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'admin-pass'


# Frozen clock for the quiz session: every answer lands 0 ms after its question.
FROZEN_NOW = datetime(2025, 11, 29, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def today():
    return today_str()


def login_client(client, user_id):
    with client.session_transaction() as session:
        session['_user_id'] = str(user_id)
        session['_fresh'] = True


def make_user(username='player', password='password', role=User.ROLE_USER):
    user = User(username=username, user_role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def make_question(quiz_date, text='Which muscle is the prime mover of shoulder abduction?', correct_id='b'):
    question = DailyQuestion(
        question=text,
        options=[
            {'id': 'a', 'text': 'Supraspinatus'},
            {'id': 'b', 'text': 'Deltoid'},
            {'id': 'c', 'text': 'Teres minor'},
            {'id': 'd', 'text': 'Subscapularis'},
        ],
        correct_id=correct_id,
        quiz_date=quiz_date,
    )
    db.session.add(question)
    db.session.commit()
    return question


def make_questions(quiz_date, count, correct_id='b'):
    return [make_question(quiz_date, text=f'Question {i + 1} for {quiz_date}', correct_id=correct_id)
            for i in range(count)]
