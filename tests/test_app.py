import pytest
from fastapi.testclient import TestClient

from app import app, get_cache
from post_translations.cache import TranslationCache
from post_translations.translation import TranslationResult, TranslationTransportError


class StaticProvider:
    def __init__(self, result=None, error=None):
        self.result = result or TranslationResult("hola", "en")
        self.error = error

    async def translate(self, text, target_language, source_language="auto"):
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def provider():
    return StaticProvider()


@pytest.fixture
def cache(provider):
    return TranslationCache(provider, default_target="es")


@pytest.fixture
def client(cache):
    app.dependency_overrides[get_cache] = lambda: cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_healthcheck(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "ok"


def test_translate_and_wait(client, cache):
    response = client.post("/translations/post1?wait=true", json={"text": "hello"})

    assert response.status_code == 200
    assert response.json() == {
        "translated_text": "hola",
        "source_language": "en",
        "target_language": "es",
        "status": "success",
        "error_message": None,
        "complete": True,
    }
    assert cache.is_complete("post1")


def test_translate_returns_pending_record(client):
    response = client.post("/translations/post1", json={"text": "hello", "target_language": "fr"})

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == "pending"
    assert body["translated_text"] == ""
    assert body["target_language"] == "fr"
    assert body["complete"] is False


@pytest.mark.parametrize("provider", [StaticProvider(error=TranslationTransportError("offline"))])
def test_failed_translation_is_reported(client, provider):
    response = client.post("/translations/post2?wait=true", json={"text": "hello"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "failed"
    assert body["error_message"] == "offline"
    assert body["complete"] is False


def test_read_and_list_translations(client):
    client.post("/translations/posts/abc?wait=true", json={"text": "hello"})

    assert client.get("/translations/posts/abc").json()["translated_text"] == "hola"
    assert list(client.get("/translations").json()) == ["posts/abc"]
    assert client.get("/translations/missing").status_code == 404


def test_clear_translation(client, cache):
    client.post("/translations/post1?wait=true", json={"text": "hello"})

    assert client.delete("/translations/post1").status_code == 204
    assert client.delete("/translations/post1").status_code == 204
    assert cache.get("post1") is None
    assert client.get("/translations/post1").status_code == 404


def test_invalid_arguments_are_rejected(client, cache):
    assert client.post("/translations/post1", json={"text": ""}).status_code == 422
    response = client.post("/translations/post1", json={"text": "hello", "target_language": ""})
    assert response.status_code == 422
    assert len(cache) == 0
