# petigram/services/document_store.py
"""
경로(key-path) 기반 트리형 문서 저장소.

- RealtimeDatabaseStore: firebase_admin.db 를 사용하는 실제 저장소
- InMemoryDocumentStore: 개발/테스트용 프로세스 내부 저장소

두 구현 모두 Realtime Database 와 같은 규칙을 따릅니다.
빈 컬렉션은 '경로 없음(None)' 으로 표현될 수 있으므로 호출자가 정규화해야 합니다.
"""

import copy
import logging
import threading
import uuid
from typing import Any, Dict, Optional

from firebase_admin import db, exceptions as firebase_exceptions
from google.auth import exceptions as google_auth_exceptions

from petigram.core.errors import TransportFailure, WriteError

# 서비스 계정 토큰 갱신 실패(google.auth)도 네트워크 실패와 같게 다룹니다.
_TRANSPORT_ERRORS = (firebase_exceptions.FirebaseError, google_auth_exceptions.GoogleAuthError, ValueError)


class DocumentStore:
    """저장소 인터페이스. 서비스 계층은 이 네 가지 연산만 사용합니다."""

    def read(self, path: str) -> Optional[Any]:
        raise NotImplementedError

    def write(self, path: str, value: Any) -> None:
        raise NotImplementedError

    def merge(self, path: str, partial_value: Dict[str, Any]) -> None:
        raise NotImplementedError

    def append_child(self, path: str) -> str:
        """path 아래에 새 자식 키를 발급해 반환합니다. 값은 아직 쓰지 않습니다."""
        raise NotImplementedError


class RealtimeDatabaseStore(DocumentStore):
    """
    Firebase Realtime Database 어댑터.
    읽기 실패는 TransportFailure, 쓰기 실패는 WriteError 로 변환합니다.
    """

    def __init__(self, app=None):
        self.app = app

    def _ref(self, path: str):
        return db.reference(path, app=self.app)

    def read(self, path: str) -> Optional[Any]:
        try:
            return self._ref(path).get()
        except _TRANSPORT_ERRORS as e:
            logging.error(f"Realtime Database 읽기 실패 (path: {path}): {e}")
            raise TransportFailure(str(e)) from e

    def write(self, path: str, value: Any) -> None:
        try:
            self._ref(path).set(value)
        except _TRANSPORT_ERRORS + (TypeError,) as e:
            logging.error(f"Realtime Database 쓰기 실패 (path: {path}): {e}", exc_info=True)
            raise WriteError(str(e)) from e

    def merge(self, path: str, partial_value: Dict[str, Any]) -> None:
        try:
            self._ref(path).update(partial_value)
        except _TRANSPORT_ERRORS + (TypeError,) as e:
            logging.error(f"Realtime Database 병합 실패 (path: {path}): {e}", exc_info=True)
            raise WriteError(str(e)) from e

    def append_child(self, path: str) -> str:
        try:
            # push() 는 시간순 정렬이 되는 고유 키를 발급합니다.
            return self._ref(path).push().key
        except _TRANSPORT_ERRORS as e:
            logging.error(f"Realtime Database 키 발급 실패 (path: {path}): {e}", exc_info=True)
            raise WriteError(str(e)) from e


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (dict, list)) and len(value) == 0)


def _pruned(value: Any) -> Any:
    """빈 하위 컬렉션을 제거한 사본을 만듭니다."""
    if isinstance(value, dict):
        result = {}
        for key, child in value.items():
            child = _pruned(child)
            if not _is_empty(child):
                result[key] = child
        return result
    if isinstance(value, list):
        return [_pruned(item) for item in value]
    return copy.deepcopy(value)


class InMemoryDocumentStore(DocumentStore):
    """
    dict 트리로 구현한 저장소. 읽기는 깊은 복사본을 돌려주고,
    빈 값을 쓰면 해당 경로가 삭제됩니다(Realtime Database 와 동일).
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._root: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.RLock()

    @staticmethod
    def _segments(path: str):
        return [segment for segment in path.strip('/').split('/') if segment]

    def read(self, path: str) -> Optional[Any]:
        with self._lock:
            node: Any = self._root
            for segment in self._segments(path):
                if isinstance(node, dict) and segment in node:
                    node = node[segment]
                elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
                    node = node[int(segment)]
                else:
                    return None
            return None if _is_empty(node) else copy.deepcopy(node)

    def write(self, path: str, value: Any) -> None:
        segments = self._segments(path)
        value = _pruned(value)
        with self._lock:
            if not segments:
                self._root = {} if _is_empty(value) else value
                return
            if _is_empty(value):
                self._delete(segments)
                return
            parent = self._root
            for segment in segments[:-1]:
                child = parent.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    parent[segment] = child
                parent = child
            parent[segments[-1]] = value

    def merge(self, path: str, partial_value: Dict[str, Any]) -> None:
        base = path.strip('/')
        with self._lock:
            for key, value in partial_value.items():
                self.write(f"{base}/{key}" if base else key, value)

    def append_child(self, path: str) -> str:
        return f"-{uuid.uuid4().hex[:19]}"

    def _delete(self, segments):
        # 삭제 후 비게 된 상위 노드도 함께 정리합니다.
        trail = []
        node = self._root
        for segment in segments[:-1]:
            if not isinstance(node, dict) or segment not in node:
                return
            trail.append((node, segment))
            node = node[segment]
        if isinstance(node, dict):
            node.pop(segments[-1], None)
        for parent, segment in reversed(trail):
            if _is_empty(parent[segment]):
                del parent[segment]
