import pytest
import requests

from utgen.ai_service import AIService
from utgen.core.config import GenSettings
from utgen.models import Prompt
from utgen.utils import llm_client
from utgen.utils.exceptions import AIServiceError
from utgen.utils.llm_client import LLMConfig, build_messages, call_llm_sync


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


@pytest.fixture
def config():
    return LLMConfig("https://llm.example.com/v1/", "gpt-test", api_key="secret", timeout=5)


def test_completions_url(config):
    assert config.completions_url == "https://llm.example.com/v1/chat/completions"
    assert LLMConfig("https://x/chat/completions", "m").completions_url == "https://x/chat/completions"


def test_build_messages():
    assert build_messages("", "hi") == [{"role": "user", "content": "hi"}]
    assert build_messages("sys", "hi")[0] == {"role": "system", "content": "sys"}


def test_successful_call(monkeypatch, config):
    captured = {}

    def fake_post(url, json, headers, timeout):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(payload={
            "choices": [{"message": {"content": "new_tests: []"}}],
            "usage": {"prompt_tokens": 120, "completion_tokens": 30},
        })

    monkeypatch.setattr(llm_client.requests, "post", fake_post)

    response = call_llm_sync(build_messages("s", "u"), config, max_tokens=4096)

    assert response.text == "new_tests: []"
    assert response.total_tokens == 150
    assert captured["headers"]["Authorization"] == "Bearer secret"
    assert captured["json"]["model"] == "gpt-test"
    assert captured["json"]["max_tokens"] == 4096
    assert captured["timeout"] == 5


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=500, text="boom"),
    FakeResponse(payload=None),
    FakeResponse(payload={"unexpected": True}),
])
def test_bad_responses_raise(monkeypatch, config, response):
    monkeypatch.setattr(llm_client.requests, "post", lambda *args, **kwargs: response)

    with pytest.raises(AIServiceError):
        call_llm_sync(build_messages("s", "u"), config)


def test_connection_error_raises(monkeypatch, config):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(llm_client.requests, "post", fake_post)

    with pytest.raises(AIServiceError):
        call_llm_sync(build_messages("s", "u"), config)


def test_missing_model_is_rejected():
    with pytest.raises(AIServiceError):
        call_llm_sync(build_messages("s", "u"), LLMConfig("https://x", ""))


def test_ai_service_from_settings(monkeypatch):
    seen = {}

    def fake_post(url, json, headers, timeout):
        seen["messages"] = json["messages"]
        return FakeResponse(payload={"choices": [{"message": {"content": "ok"}}]})

    monkeypatch.setattr(llm_client.requests, "post", fake_post)
    ai = AIService.from_settings(GenSettings(model="gpt-x", api_base_url="https://llm.local/v1"))

    response = ai.call(Prompt(system="sys", user="usr"), max_tokens=10)

    assert ai.model == "gpt-x"
    assert response.text == "ok"
    assert seen["messages"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "usr"}]
