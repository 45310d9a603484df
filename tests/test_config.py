import importlib

import pytest

from post_translations import config


@pytest.fixture
def reload_config(monkeypatch):
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults(reload_config, monkeypatch):
    for name in ("TRANSLATE_TARGET_LANG", "TRANSLATE_SOURCE_LANG", "TRANSLATE_PROVIDER", "TRANSLATE_FENCE_REQUESTS"):
        monkeypatch.delenv(name, raising=False)
    cfg = reload_config()
    assert cfg.TARGET_LANG == "en"
    assert cfg.SOURCE_LANG == "auto"
    assert cfg.PROVIDER == "google"
    assert cfg.FENCE_REQUESTS is False


def test_environment_overrides(reload_config, monkeypatch):
    monkeypatch.setenv("TRANSLATE_TARGET_LANG", "ja")
    monkeypatch.setenv("TRANSLATE_PROVIDER", " Deep ")
    monkeypatch.setenv("TRANSLATE_TIMEOUT", "3.5")
    monkeypatch.setenv("TRANSLATE_FENCE_REQUESTS", "yes")
    cfg = reload_config()
    assert cfg.TARGET_LANG == "ja"
    assert cfg.PROVIDER == "deep"
    assert cfg.HTTP_TIMEOUT == 3.5
    assert cfg.FENCE_REQUESTS is True
