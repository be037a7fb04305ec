# petigram/test_app.py
"""Flask 앱 통합 테스트 (메모리 백엔드)"""

import pytest

from petigram import create_app
from petigram.api.feed.controller import FeedState


def _sign_up(client, email='a@x.io', password='secret1', username='Buddy'):
    return client.post('/api/auth/signup', json={'email': email, 'password': password, 'username': username})


def test_create_app_uses_injected_services(app, store):
    assert app.config['TESTING']
    assert app.services['store'] is store
    assert app.services['feed'].state is FeedState.SIGNED_OUT

def test_create_app_memory_backend_without_injection():
    app = create_app('testing')
    try:
        assert app.services['feed'].state is FeedState.SIGNED_OUT
    finally:
        app.services['feed'].stop()

# --- /api/auth ---
def test_sign_up_and_me(client):
    response = _sign_up(client)
    assert response.status_code == 201
    body = response.get_json()
    assert body['username'] == 'Buddy'
    assert body['email'] == 'a@x.io'
    assert 'password' not in body

    me = client.get('/api/auth/me')
    assert me.status_code == 200
    assert me.get_json()['id'] == body['id']

def test_sign_up_validation(client):
    response = client.post('/api/auth/signup', json={'email': 'not-an-email', 'password': '123', 'username': ''})
    assert response.status_code == 400
    details = response.get_json()['details']
    assert set(details) == {'email', 'password', 'username'}

def test_sign_up_duplicate(client):
    _sign_up(client)
    client.post('/api/auth/logout')
    response = _sign_up(client, username='Other')
    assert response.status_code == 409
    assert response.get_json()['error_code'] == 'DUPLICATE_ACCOUNT'

def test_log_in_failure_is_generic(client):
    _sign_up(client)
    client.post('/api/auth/logout')
    wrong_password = client.post('/api/auth/login', json={'email': 'a@x.io', 'password': 'nope'})
    unknown_email = client.post('/api/auth/login', json={'email': 'b@x.io', 'password': 'secret1'})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()

def test_log_out_then_me_is_unauthenticated(client):
    _sign_up(client)
    assert client.post('/api/auth/logout').status_code == 200
    response = client.get('/api/auth/me')
    assert response.status_code == 401
    assert response.get_json()['error_code'] == 'UNAUTHENTICATED'

# --- /api/feed ---
def test_feed_after_sign_up_contains_demo_posts(client):
    _sign_up(client)
    body = client.get('/api/feed').get_json()
    assert body['state'] == 'ready'
    assert body['category'] == 'all'
    assert body['is_loading'] is False
    assert body['last_read_failed'] is False
    assert body['user']['username'] == 'Buddy'
    assert [p['id'] for p in body['posts']] == ['post_1', 'post_2', 'post_3']
    assert body['posts'][0]['like_count'] == len(body['posts'][0]['likes'])

def test_feed_signed_out(client):
    body = client.get('/api/feed').get_json()
    assert body['state'] == 'signed_out'
    assert body['user'] is None
    assert body['posts'] == []

def test_feed_category_query(client):
    _sign_up(client)
    body = client.get('/api/feed?category=cat').get_json()
    assert body['category'] == 'cat'
    assert [p['category'] for p in body['posts']] == ['cat']

    # 조회는 선택된 필터를 바꾸지 않습니다.
    body = client.get('/api/feed').get_json()
    assert body['category'] == 'all'
    assert len(body['posts']) > 1

    response = client.get('/api/feed?category=hamster')
    assert response.status_code == 400

def test_feed_category_query_does_not_override_selection(client):
    _sign_up(client)
    client.put('/api/feed/category', json={'category': 'bird'})
    assert client.get('/api/feed?category=dog').get_json()['category'] == 'dog'
    body = client.get('/api/feed').get_json()
    assert body['category'] == 'bird'
    assert [p['id'] for p in body['posts']] == ['post_3']

def test_select_category(client):
    _sign_up(client)
    response = client.put('/api/feed/category', json={'category': 'bird'})
    assert response.status_code == 200
    assert [p['id'] for p in response.get_json()['posts']] == ['post_3']

    assert client.put('/api/feed/category', json={}).status_code == 400
    assert client.put('/api/feed/category', json={'category': 'fish'}).status_code == 400

def test_refresh_requires_user(client):
    assert client.post('/api/feed/refresh').status_code == 401
    _sign_up(client)
    assert client.post('/api/feed/refresh').status_code == 200

def test_upload_modal(client, app):
    assert client.post('/api/feed/modal').status_code == 401
    _sign_up(client)
    assert client.post('/api/feed/modal').status_code == 204
    assert app.services['feed'].is_upload_modal_open
    assert client.delete('/api/feed/modal').status_code == 204
    assert not app.services['feed'].is_upload_modal_open

# --- /api/posts ---
def test_create_post(client):
    _sign_up(client)
    response = client.post('/api/posts', json={'image_url': 'https://img/1', 'caption': 'Hi #dog #DOG', 'category': 'dog'})
    assert response.status_code == 201
    post = response.get_json()
    assert post['hashtags'] == ['#dog', '#DOG']
    assert post['username'] == 'Buddy'
    assert post['filter'] == 'none'
    assert post['likes'] == [] and post['comments'] == []

    feed = client.get('/api/feed').get_json()
    assert feed['posts'][0]['id'] == post['id']

def test_create_post_requires_user(client):
    response = client.post('/api/posts', json={'image_url': 'https://img/1', 'category': 'dog'})
    assert response.status_code == 401

@pytest.mark.parametrize('payload', [
    {'caption': 'no image', 'category': 'dog'},
    {'image_url': 'https://img/1', 'category': 'hamster'},
    {'image_url': '', 'category': 'cat'},
])
def test_create_post_validation(client, payload):
    _sign_up(client)
    assert client.post('/api/posts', json=payload).status_code == 400

def test_toggle_like(client):
    user = _sign_up(client).get_json()
    liked = client.post('/api/posts/post_2/like')
    assert liked.status_code == 200
    assert user['id'] in liked.get_json()['likes']

    unliked = client.post('/api/posts/post_2/like').get_json()
    assert user['id'] not in unliked['likes']

def test_toggle_like_signed_out(client):
    assert client.post('/api/posts/post_1/like').status_code == 401

def test_toggle_like_missing_post(client):
    _sign_up(client)
    response = client.post('/api/posts/nope/like')
    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'POST_NOT_FOUND'

def test_add_comment(client):
    _sign_up(client)
    response = client.post('/api/posts/post_1/comments', json={'text': 'nice'})
    assert response.status_code == 201
    comments = response.get_json()['comments']
    assert comments[-1]['text'] == 'nice'
    assert comments[-1]['username'] == 'Buddy'

def test_add_comment_validation_and_auth(client):
    assert client.post('/api/posts/post_1/comments', json={'text': 'nice'}).status_code == 401
    _sign_up(client)
    assert client.post('/api/posts/post_1/comments', json={'text': ''}).status_code == 400

# --- 디버그 도구 ---
def test_debug_blueprint_absent_outside_debug(client):
    assert client.post('/api/debug/force-seed').status_code == 404

def test_force_seed_cli(app, store):
    store.write('posts/extra', {'caption': 'stale'})
    result = app.test_cli_runner().invoke(args=['force-seed'])
    assert result.exit_code == 0
    assert 'Uploaded 3 posts.' in result.output
    assert set(store.read('posts')) == {'post_1', 'post_2', 'post_3'}
