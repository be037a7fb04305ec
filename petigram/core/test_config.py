# petigram/core/test_config.py
"""환경 변수 기반 설정 테스트"""

import importlib

import pytest

from petigram.core import config


@pytest.fixture
def reload_config(monkeypatch):
    """환경 변수를 바꾼 뒤 설정 모듈을 다시 읽고, 테스트가 끝나면 원래대로 되돌립니다."""
    def _reload(**env):
        for name, value in env.items():
            if value is None:
                monkeypatch.delenv(name, raising=False)
            else:
                monkeypatch.setenv(name, value)
        return importlib.reload(config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)

def test_backend_is_read_from_petigram_backend(reload_config):
    module = reload_config(PETIGRAM_BACKEND='memory')
    assert module.Config.BACKEND == 'memory'
    assert module.ProductionConfig.BACKEND == 'memory'

def test_backend_defaults_to_firebase(reload_config):
    module = reload_config(PETIGRAM_BACKEND=None)
    assert module.Config.BACKEND == 'firebase'

def test_testing_config_always_uses_memory_backend(reload_config):
    module = reload_config(PETIGRAM_BACKEND='firebase')
    assert module.config_by_name['testing'].BACKEND == 'memory'

@pytest.mark.parametrize('raw, expected', [
    ('true', True), ('1', True), (' Yes ', True), ('on', True),
    ('false', False), ('0', False), ('', False),
])
def test_seed_demo_data_flag(reload_config, raw, expected):
    module = reload_config(SEED_DEMO_DATA=raw)
    assert module.Config.SEED_DEMO_DATA is expected

def test_seed_demo_data_defaults_on(reload_config):
    module = reload_config(SEED_DEMO_DATA=None)
    assert module.Config.SEED_DEMO_DATA is True
