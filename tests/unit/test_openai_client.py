from types import SimpleNamespace

import pytest

from core.exceptions import ClassificationParseError, LLMError
from integrations.openai_client import OpenAIClient


class FakeCompletions:
    def __init__(self, content=None, finish_reason="stop", error=None):
        self.content = content
        self.finish_reason = finish_reason
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        choice = SimpleNamespace(
            message=SimpleNamespace(content=self.content),
            finish_reason=self.finish_reason,
        )
        usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        return SimpleNamespace(choices=[choice], usage=usage)


@pytest.fixture
def client_factory():
    def _factory(**kwargs):
        client = OpenAIClient(api_key="sk-test")
        completions = FakeCompletions(**kwargs)
        client.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        return client, completions

    return _factory


def test_missing_api_key_raises(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ValueError):
        OpenAIClient()


def test_classify_returns_parsed_json(client_factory):
    client, completions = client_factory(content='{"is_security_event": true, "location": "חיפה"}')

    result = client.classify_security_event("נשמעה אזעקה בחיפה")

    assert result == {"is_security_event": True, "location": "חיפה"}
    request = completions.requests[0]
    assert request["model"] == "gpt-4o-mini"
    assert request["temperature"] == 0
    assert request["response_format"]["type"] == "json_schema"
    assert "נשמעה אזעקה בחיפה" in request["messages"][1]["content"]


def test_classify_accepts_fenced_json_with_hebrew_quotes(client_factory):
    client, _ = client_factory(content='```json\n{"is_security_event": true, "location": "בסיס צה״ל"}\n```')

    result = client.classify_security_event("טקסט")

    assert result["location"] == "בסיס צה״ל"


@pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"location": "חיפה"}', ""])
def test_unparsable_response_raises_parse_error(client_factory, content):
    client, _ = client_factory(content=content)

    with pytest.raises(ClassificationParseError):
        client.classify_security_event("טקסט")


def test_api_failure_raises_llm_error(client_factory):
    client, _ = client_factory(error=RuntimeError("rate limited"))

    with pytest.raises(LLMError) as exc_info:
        client.classify_security_event("טקסט")

    assert exc_info.value.context["provider"] == "openai"


def test_truncated_response_raises_llm_error(client_factory):
    client, _ = client_factory(content='{"is_security', finish_reason="length")

    with pytest.raises(LLMError):
        client.classify_security_event("טקסט")
