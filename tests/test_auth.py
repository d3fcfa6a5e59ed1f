from physioquiz_app.models import User

from conftest import make_user


def test_register_creates_player(app, client):
    response = client.post('/auth/register', data={
        'username': 'newbie',
        'email': '',
        'password': 'secret123',
        'password2': 'secret123',
    })
    assert response.status_code == 302

    user = User.query.filter_by(username='newbie').first()
    assert user is not None
    assert user.email is None
    assert user.is_admin is False
    assert user.check_password('secret123')


def test_register_rejects_taken_username(app, client):
    make_user('taken')
    response = client.post('/auth/register', data={
        'username': 'taken',
        'password': 'secret123',
        'password2': 'secret123',
    })
    assert response.status_code == 200
    assert User.query.filter_by(username='taken').count() == 1


def test_login_with_bad_password(app, client):
    make_user('eve', password='right-pass')
    response = client.post('/auth/login', data={'username': 'eve', 'password': 'wrong'})
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_login_ignores_offsite_next(app, client):
    make_user('frank', password='secret123')
    response = client.post('/auth/login?next=https://evil.example/',
                           data={'username': 'frank', 'password': 'secret123'})
    assert response.status_code == 302
    assert 'evil.example' not in response.headers['Location']


def test_login_follows_local_next(app, client):
    make_user('gina', password='secret123')
    response = client.post('/auth/login?next=/leaderboard/',
                           data={'username': 'gina', 'password': 'secret123'})
    assert response.headers['Location'].endswith('/leaderboard/')


def test_default_admin_is_seeded(app):
    admin = User.query.filter_by(username='admin').first()
    assert admin is not None
    assert admin.is_admin
    assert admin.check_password('admin-pass')
