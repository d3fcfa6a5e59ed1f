import io

import pytest

from physioquiz_app.models import DailyQuestion, User, db
from physioquiz_app.modules.admin.services.question_admin_service import QuestionAdminService

from conftest import login_client, make_question, make_user


@pytest.fixture
def admin_client(app, client):
    admin = User.query.filter_by(username='admin').first()
    login_client(client, admin.user_id)
    return client


def _payload(**overrides):
    payload = {
        'question': 'Normal resting respiratory rate in adults?',
        'options': [
            {'id': 'a', 'text': '6-8'},
            {'id': 'b', 'text': '12-20'},
            {'id': 'c', 'text': '25-30'},
            {'id': 'd', 'text': ''},
        ],
        'correct_id': 'b',
        'date': '2025-12-01',
    }
    payload.update(overrides)
    return payload


def test_anonymous_users_are_sent_to_login(client):
    response = client.get('/admin/questions/')
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_players_are_forbidden(app, client):
    user = make_user()
    login_client(client, user.user_id)
    assert client.get('/admin/questions/').status_code == 403
    response = client.get('/admin/questions/api')
    assert response.status_code == 403
    assert response.get_json()['code'] == 'UNAUTHORIZED'


def test_create_question_via_api_drops_empty_options(admin_client):
    response = admin_client.post('/admin/questions/api', json=_payload())
    assert response.status_code == 201
    question = response.get_json()['question']
    assert question['date'] == '2025-12-01'
    assert [option['id'] for option in question['options']] == ['a', 'b', 'c']
    assert question['correct_id'] == 'b'


def test_create_question_requires_matching_correct_option(admin_client):
    response = admin_client.post('/admin/questions/api', json=_payload(correct_id='d'))
    assert response.status_code == 400
    assert DailyQuestion.query.count() == 0


def test_create_question_requires_date(admin_client):
    response = admin_client.post('/admin/questions/api', json=_payload(date='tomorrow'))
    assert response.status_code == 400


def test_update_and_reassign_date(admin_client):
    question = make_question('2025-11-29')

    response = admin_client.put(f'/admin/questions/api/{question.question_id}',
                                json=_payload(question='Updated text', date='2025-11-29'))
    assert response.status_code == 200
    assert response.get_json()['question']['question'] == 'Updated text'

    response = admin_client.patch(f'/admin/questions/api/{question.question_id}/date', json={'date': '2025-12-05'})
    assert response.status_code == 200
    assert db.session.get(DailyQuestion, question.question_id).quiz_date == '2025-12-05'


def test_delete_question(admin_client):
    question = make_question('2025-11-29')
    response = admin_client.delete(f'/admin/questions/api/{question.question_id}')
    assert response.status_code == 200
    assert db.session.get(DailyQuestion, question.question_id) is None


def test_missing_question_is_404(admin_client):
    response = admin_client.get('/admin/questions/api/999')
    assert response.status_code == 404


def test_folders_group_by_date_newest_first(app):
    make_question('2025-11-28', text='Older')
    make_question('2025-11-30', text='Newer A')
    make_question('2025-11-30', text='Newer B')

    folders = QuestionAdminService.group_by_date(QuestionAdminService.list_questions(), today='2025-11-29')
    assert [folder['date'] for folder in folders] == ['2025-11-30', '2025-11-28']
    assert folders[0]['count'] == 2
    assert folders[0]['is_past'] is False
    assert folders[0]['is_upcoming'] is True
    assert folders[1]['is_past'] is True
    assert folders[1]['is_upcoming'] is False
    assert [q.question for q in folders[0]['questions']] == ['Newer A', 'Newer B']


def test_search_matches_text_and_date(app):
    make_question('2025-11-28', text='Borg scale of perceived exertion')
    make_question('2025-11-30', text='Target heart rate zone')

    assert [q.question for q in QuestionAdminService.list_questions('BORG')] == ['Borg scale of perceived exertion']
    assert [q.quiz_date for q in QuestionAdminService.list_questions('2025-11-30')] == ['2025-11-30']
    assert len(QuestionAdminService.list_questions('')) == 2


def test_list_api_returns_folders(admin_client):
    make_question('2025-11-28')
    data = admin_client.get('/admin/questions/api?q=2025-11').get_json()
    assert data['count'] == 1
    assert data['folders'][0]['date'] == '2025-11-28'
    assert data['folders'][0]['questions'][0]['correct_id'] == 'b'
    assert data['folders'][0]['is_past'] is True
    assert data['folders'][0]['is_upcoming'] is False


def test_html_editor_add_and_edit(admin_client):
    response = admin_client.post('/admin/questions/add', data={
        'question': 'First-line test for DVT?',
        'quiz_date': '2025-12-02',
        'option_a': 'D-dimer / duplex ultrasound',
        'option_b': 'Chest X-ray',
        'option_c': '',
        'option_d': '',
        'correct_id': 'a',
    })
    assert response.status_code == 302
    question = DailyQuestion.query.filter_by(quiz_date='2025-12-02').one()
    assert len(question.options) == 2

    response = admin_client.post(f'/admin/questions/{question.question_id}/edit', data={
        'question': 'First-line test for suspected DVT?',
        'quiz_date': '2025-12-03',
        'option_a': 'D-dimer / duplex ultrasound',
        'option_b': 'Chest X-ray',
        'option_c': 'ECG',
        'option_d': '',
        'correct_id': 'a',
    })
    assert response.status_code == 302
    db.session.refresh(question)
    assert question.quiz_date == '2025-12-03'
    assert len(question.options) == 3


def test_html_editor_rejects_single_option(admin_client):
    response = admin_client.post('/admin/questions/add', data={
        'question': 'Only one option',
        'quiz_date': '2025-12-02',
        'option_a': 'Alone',
        'correct_id': 'a',
    })
    assert response.status_code == 200
    assert DailyQuestion.query.count() == 0


def test_questions_page_renders(admin_client):
    make_question('2025-11-28', text='Renders in a folder')
    response = admin_client.get('/admin/questions/?q=folder')
    assert response.status_code == 200
    assert b'Renders in a folder' in response.data
    assert b'data-watch-table="daily_quiz"' in response.data
    assert b'Archived' in response.data


def test_import_study_file_spreads_questions_over_days(admin_client):
    blocks = []
    for i in range(3):
        blocks.append(
            f"Q: Imported question {i + 1}?\n"
            "Options:\n"
            "A) First\n"
            "B) Second\n"
            "C) Third\n"
            "Answer: B\n"
        )
    content = '\n---\n'.join(blocks).encode('utf-8')

    response = admin_client.post('/admin/questions/import', data={
        'questions_file': (io.BytesIO(content), 'cardio.txt'),
        'start_date': '2025-12-10',
        'per_day': '2',
    }, content_type='multipart/form-data')
    assert response.status_code == 302

    dates = [q.quiz_date for q in DailyQuestion.query.order_by(DailyQuestion.question_id).all()]
    assert dates == ['2025-12-10', '2025-12-10', '2025-12-11']
