# petigram/conftest.py
"""공용 pytest fixture. 모든 테스트는 메모리 백엔드로 동작합니다."""

import pytest

from petigram import create_app
from petigram.api.auth.services import AuthSessionManager
from petigram.api.posts.services import PostService
from petigram.models.user import User
from petigram.services.auth_provider import InMemoryAuthProvider
from petigram.services.document_store import InMemoryDocumentStore


class FakeTimer:
    """threading.Timer 대역. fire() 를 호출해야 콜백이 실행됩니다."""
    instances = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


@pytest.fixture
def store():
    return InMemoryDocumentStore()

@pytest.fixture
def auth_provider():
    return InMemoryAuthProvider()

@pytest.fixture
def session_manager(auth_provider, store):
    return AuthSessionManager(auth_provider=auth_provider, store=store)

@pytest.fixture
def post_service(store):
    return PostService(store=store)

@pytest.fixture
def user_x():
    return User(id='userX', email='x@example.com', username='PuppyFan', avatar='https://picsum.photos/seed/PuppyFan/48/48')

@pytest.fixture
def user_y():
    return User(id='userY', email='y@example.com', username='KittyFan', avatar='https://picsum.photos/seed/KittyFan/48/48')

@pytest.fixture
def fake_timer():
    FakeTimer.instances = []
    return FakeTimer

@pytest.fixture
def app(store, auth_provider):
    app = create_app('testing', store=store, auth_provider=auth_provider)
    yield app
    app.services['feed'].stop()

@pytest.fixture
def client(app):
    return app.test_client()
