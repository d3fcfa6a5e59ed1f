from physioquiz_app.models import LeaderboardEntry, QuizHistory, db
from physioquiz_app.modules.leaderboard.services.leaderboard_service import (
    AVATARS,
    LeaderboardService,
    avatar_for_rank,
)
from physioquiz_app.modules.quiz.config import QuizConfig

from conftest import login_client, make_user


def test_sync_twice_adds_each_day_once(app):
    user = make_user()
    history = {'2025-11-27': 30000, '2025-11-28': 40000}

    first = LeaderboardService.sync_local_scores(user, history)
    second = LeaderboardService.sync_local_scores(user, history)

    assert sorted(first['inserted']) == ['2025-11-27', '2025-11-28']
    assert first['skipped'] == []
    assert second['inserted'] == []
    assert sorted(second['skipped']) == ['2025-11-27', '2025-11-28']

    entry = db.session.get(LeaderboardEntry, user.user_id)
    assert entry.total_score == 70000
    assert entry.games_played == 2
    assert QuizHistory.query.filter_by(user_id=user.user_id).count() == 2


def test_partial_overlap_inserts_only_new_days(app):
    user = make_user()
    LeaderboardService.sync_local_scores(user, {'2025-11-27': 30000})
    result = LeaderboardService.sync_local_scores(user, {'2025-11-27': 99999, '2025-11-28': 1000})

    assert result['inserted'] == ['2025-11-28']
    assert result['skipped'] == ['2025-11-27']
    assert db.session.get(LeaderboardEntry, user.user_id).total_score == 31000


def test_invalid_dates_are_reported_as_failed(app):
    user = make_user()
    result = LeaderboardService.sync_local_scores(user, {'not-a-date': 100})
    assert result['failed'] == ['not-a-date']
    assert db.session.get(LeaderboardEntry, user.user_id) is None


def test_career_total_falls_back_to_local_history_when_anonymous(app):
    class Anonymous:
        is_authenticated = False

    career = LeaderboardService.career_total(Anonymous(), {'2025-11-27': 30500, '2025-11-28': 20000})
    assert career == {'total_score': 50500, 'display_points': 50, 'games_played': 2, 'source': 'local'}


def test_career_total_prefers_ledger_for_signed_in_user(app):
    user = make_user()
    LeaderboardService.sync_local_scores(user, {'2025-11-27': 12000})
    career = LeaderboardService.career_total(user, {'2025-11-27': 12000, '2025-11-28': 50000})
    assert career['source'] == 'remote'
    assert career['total_score'] == 12000
    assert career['display_points'] == 12


def test_leaderboard_orders_by_total_and_marks_viewer(app):
    alice = make_user('alice')
    bob = make_user('bob')
    LeaderboardService.sync_local_scores(alice, {'2025-11-28': 20000})
    LeaderboardService.sync_local_scores(bob, {'2025-11-28': 45000})

    rows = LeaderboardService.get_leaderboard(limit=10, viewer_user=alice)
    assert [row['username'] for row in rows] == ['bob', 'alice']
    assert [row['rank'] for row in rows] == [1, 2]
    assert rows[0]['display_points'] == 45
    assert rows[1]['is_current_user'] is True
    assert rows[0]['avatar_url'] == avatar_for_rank(0)


def test_avatars_rotate_by_rank():
    assert avatar_for_rank(0) == AVATARS[0]
    assert avatar_for_rank(len(AVATARS)) == AVATARS[0]


def test_entries_endpoint(app, client):
    user = make_user('carol')
    LeaderboardService.sync_local_scores(user, {'2025-11-28': 33000})

    data = client.get('/leaderboard/api/entries?limit=5').get_json()
    assert data['success'] is True
    assert data['count'] == 1
    assert data['leaderboard'][0]['username'] == 'carol'


def test_me_endpoint_uses_local_history_when_anonymous(client):
    with client.session_transaction() as sess:
        sess[QuizConfig.HISTORY_KEY] = {'2025-11-28': 21000}

    data = client.get('/leaderboard/api/me').get_json()
    assert data['career']['source'] == 'local'
    assert data['career']['display_points'] == 21
    assert data['history'] == {'2025-11-28': 21000}


def test_me_endpoint_uses_ledger_when_signed_in(app, client):
    user = make_user()
    LeaderboardService.sync_local_scores(user, {'2025-11-28': 5000})
    login_client(client, user.user_id)

    data = client.get('/leaderboard/api/me').get_json()
    assert data['career']['source'] == 'remote'
    assert data['career']['total_score'] == 5000


def test_signing_in_pushes_local_scores(app, client):
    user = make_user('dora', password='secret123')
    with client.session_transaction() as sess:
        sess[QuizConfig.HISTORY_KEY] = {'2025-11-27': 10100, '2025-11-28': 20200}

    response = client.post('/auth/login', data={'username': 'dora', 'password': 'secret123'})
    assert response.status_code == 302

    entry = db.session.get(LeaderboardEntry, user.user_id)
    assert entry.total_score == 30300
    assert entry.games_played == 2
