# petigram/api/auth/test_services.py
"""AuthSessionManager 테스트"""

import pytest

from petigram.api.auth.services import DEFAULT_USERNAME, USERS_PATH, AuthSessionManager, seeded_avatar_url
from petigram.core.errors import AuthError, DuplicateAccount, InvalidCredentials, TransportFailure, WriteError
from petigram.services.auth_provider import AuthProviderError, Identity, InMemoryAuthProvider
from petigram.services.document_store import InMemoryDocumentStore


class FlakyProfileStore(InMemoryDocumentStore):
    """users/ 경로 읽기만 실패하는 저장소"""
    def read(self, path):
        if path.startswith(USERS_PATH):
            raise TransportFailure("profile read failed")
        return super().read(path)


class ReadOnlyProfileStore(InMemoryDocumentStore):
    """users/ 경로 쓰기만 실패하는 저장소"""
    def write(self, path, value):
        if path.startswith(USERS_PATH):
            raise WriteError("permission denied")
        super().write(path, value)


# --- sign_up ---
def test_sign_up_opens_session_with_seeded_avatar(session_manager, auth_provider, store):
    user = session_manager.sign_up('a@x.io', 'secret1', 'Buddy')

    assert user.username == 'Buddy'
    assert user.email == 'a@x.io'
    assert user.avatar == seeded_avatar_url('Buddy')
    assert auth_provider.current_identity.uid == user.id
    assert store.read(f'users/{user.id}') == {'username': 'Buddy', 'avatar': seeded_avatar_url('Buddy')}

def test_sign_up_duplicate_email(session_manager):
    session_manager.sign_up('a@x.io', 'secret1', 'Buddy')
    session_manager.log_out()
    with pytest.raises(DuplicateAccount):
        session_manager.sign_up('a@x.io', 'other12', 'Copycat')

def test_sign_up_listener_sees_chosen_username(session_manager):
    events = []
    session_manager.subscribe_to_session(events.append)
    session_manager.sign_up('a@x.io', 'secret1', 'Buddy')
    assert events[0] is None
    assert events[-1].username == 'Buddy'

def test_sign_up_other_provider_error_is_auth_error(store):
    class BrokenProvider(InMemoryAuthProvider):
        def create_identity(self, email, password):
            raise AuthProviderError('weak-password', 'Password should be at least 6 characters')

    manager = AuthSessionManager(auth_provider=BrokenProvider(), store=store)
    with pytest.raises(AuthError) as exc:
        manager.sign_up('a@x.io', '123', 'Buddy')
    assert exc.value.message == 'Password should be at least 6 characters'

def test_sign_up_profile_write_failure_is_auth_error():
    manager = AuthSessionManager(auth_provider=InMemoryAuthProvider(), store=ReadOnlyProfileStore())
    with pytest.raises(AuthError) as exc:
        manager.sign_up('a@x.io', 'secret1', 'Buddy')
    assert exc.value.message == 'permission denied'

def test_sign_up_profile_read_failure_is_auth_error():
    manager = AuthSessionManager(auth_provider=InMemoryAuthProvider(), store=FlakyProfileStore())
    with pytest.raises(AuthError) as exc:
        manager.sign_up('a@x.io', 'secret1', 'Buddy')
    assert exc.value.message == 'profile read failed'

# --- log_in / log_out ---
def test_log_in_returns_hydrated_user(session_manager):
    created = session_manager.sign_up('a@x.io', 'secret1', 'Buddy')
    session_manager.log_out()
    assert session_manager.current_user() is None

    user = session_manager.log_in('a@x.io', 'secret1')
    assert user == created

@pytest.mark.parametrize('email, password', [
    ('missing@x.io', 'secret1'),
    ('a@x.io', 'wrong-password'),
])
def test_log_in_failures_are_indistinguishable(session_manager, email, password):
    session_manager.sign_up('a@x.io', 'secret1', 'Buddy')
    session_manager.log_out()
    with pytest.raises(InvalidCredentials):
        session_manager.log_in(email, password)

def test_log_out_is_harmless_without_session(session_manager):
    session_manager.log_out()
    assert session_manager.current_user() is None

# --- hydrate ---
def test_hydrate_creates_default_profile(session_manager, store):
    user = session_manager.hydrate(Identity(uid='u-1', email='n@x.io'))

    assert user.username == DEFAULT_USERNAME
    assert user.avatar == seeded_avatar_url('u-1')
    assert store.read('users/u-1') == {'username': DEFAULT_USERNAME, 'avatar': seeded_avatar_url('u-1')}

def test_hydrate_prefers_stored_profile(session_manager, store):
    store.write('users/u-1', {'username': 'Stored', 'avatar': 'https://img/stored'})
    user = session_manager.hydrate(Identity(uid='u-1', email='n@x.io', display_name='Provider', photo_url='https://img/p'))
    assert user.username == 'Stored'
    assert user.avatar == 'https://img/stored'

def test_hydrate_falls_back_to_provider_fields(session_manager, store):
    store.write('users/u-1', {'username': 'Stored'})
    user = session_manager.hydrate(Identity(uid='u-1', display_name='Provider', photo_url='https://img/p'))
    assert user.username == 'Stored'
    assert user.avatar == 'https://img/p'
    assert user.email == ''

def test_hydrate_none_is_none(session_manager):
    assert session_manager.hydrate(None) is None

# --- subscribe_to_session ---
def test_subscription_receives_current_state_then_changes(session_manager):
    events = []
    unsubscribe = session_manager.subscribe_to_session(events.append)
    user = session_manager.sign_up('a@x.io', 'secret1', 'Buddy')
    session_manager.log_out()

    assert events == [None, user, None]
    unsubscribe()

def test_disposer_is_idempotent_and_stops_events(session_manager):
    events = []
    unsubscribe = session_manager.subscribe_to_session(events.append)
    unsubscribe()
    unsubscribe()
    session_manager.sign_up('a@x.io', 'secret1', 'Buddy')
    assert events == [None]

def test_hydration_failure_skips_event():
    provider = InMemoryAuthProvider()
    provider.create_identity('a@x.io', 'secret1')
    manager = AuthSessionManager(auth_provider=provider, store=FlakyProfileStore())

    events = []
    manager.subscribe_to_session(events.append)
    provider.authenticate('a@x.io', 'secret1')
    provider.terminate_session()
    # 로그인 이벤트는 버려지고 None 이벤트만 전달됩니다.
    assert events == [None, None]
