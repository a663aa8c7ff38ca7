from types import SimpleNamespace

import pytest

from studysafe.server.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings, load_settings
from studysafe.server.llm import SYSTEM_PROMPT, RemoteCoach, RemoteModel, coerce_json
from studysafe.server.schemas import StudyPlanInput, WeeklySummaryInput
from studysafe.server.signals import detect_overload


class FakeMessages:
    def __init__(self, text):
        self.text = text
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        content = [SimpleNamespace(text=self.text)] if self.text is not None else []
        return SimpleNamespace(content=content)


def fake_client(text):
    return SimpleNamespace(messages=FakeMessages(text))


# ── JSON recovery ───────────────────────────────────────────────────────

def test_coerce_plain_json():
    assert coerce_json('{"insight": "ok"}') == {"insight": "ok"}


def test_coerce_fenced_json():
    raw = '```json\n{"focusMinutes": 25, "breakMinutes": 5}\n```'
    assert coerce_json(raw) == {"focusMinutes": 25, "breakMinutes": 5}


def test_coerce_json_inside_prose():
    raw = 'Sure! Here you go:\n{"supportiveReply": "Well done."}\nHope that helps.'
    assert coerce_json(raw) == {"supportiveReply": "Well done."}


@pytest.mark.parametrize("raw", ["", "no braces here", "[1, 2]", '"just a string"'])
def test_coerce_rejects_non_objects(raw):
    with pytest.raises(ValueError):
        coerce_json(raw)


# ── Settings ────────────────────────────────────────────────────────────

def test_settings_defaults(monkeypatch):
    for name in ("ANTHROPIC_API_KEY", "ANTHROPIC_BASE_URL", "ANTHROPIC_MODEL",
                 "STUDYSAFE_MAX_TOKENS", "STUDYSAFE_TEMPERATURE"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.api_key is None
    assert settings.remote_enabled is False
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.model == DEFAULT_MODEL


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-1234567890")
    monkeypatch.setenv("ANTHROPIC_BASE_URL", "http://localhost:9000")
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-test")
    monkeypatch.setenv("STUDYSAFE_MAX_TOKENS", "not-a-number")
    monkeypatch.setenv("STUDYSAFE_TEMPERATURE", "0.1")
    settings = load_settings()
    assert settings.remote_enabled is True
    assert settings.key_prefix == "sk-ant-1..."
    assert settings.base_url == "http://localhost:9000"
    assert settings.model == "claude-test"
    assert settings.max_tokens == 700
    assert settings.temperature == 0.1


# ── RemoteModel ─────────────────────────────────────────────────────────

def test_model_without_key_is_unavailable(capsys):
    model = RemoteModel(Settings(api_key=None))
    assert model.available is False
    assert model.complete("hello") is None
    assert "Using heuristic fallbacks" in capsys.readouterr().out


def test_model_sends_persona_and_settings():
    client = fake_client('{"insight": "ok"}')
    model = RemoteModel(Settings(api_key="sk-test-key", model="claude-x", max_tokens=321), client=client)
    assert model.complete("write an insight") == '{"insight": "ok"}'

    call = client.messages.calls[0]
    assert call["model"] == "claude-x"
    assert call["max_tokens"] == 321
    assert call["system"] == SYSTEM_PROMPT
    assert call["messages"] == [{"role": "user", "content": "write an insight"}]


def test_model_with_empty_content_returns_none():
    model = RemoteModel(Settings(api_key="sk-test-key"), client=fake_client(None))
    assert model.complete("anything") is None


def test_model_errors_propagate_to_caller():
    class Boom:
        def create(self, **kwargs):
            raise RuntimeError("status 503")

    model = RemoteModel(Settings(api_key="sk-test-key"), client=SimpleNamespace(messages=Boom()))
    with pytest.raises(RuntimeError):
        model.complete("anything")


# ── RemoteCoach prompts ─────────────────────────────────────────────────

def test_study_plan_prompt_embeds_input_and_overload():
    client = fake_client('{"dailyPlan": ["x"]}')
    remote = RemoteCoach(RemoteModel(Settings(api_key="sk-test-key"), client=client))
    payload = StudyPlanInput(subjects=["Math"], deadlines="Essay Friday", hours_per_day=5)
    data = remote.study_plan(payload, detect_overload(payload))

    assert data == {"dailyPlan": ["x"]}
    prompt = client.messages.calls[0]["messages"][0]["content"]
    assert '"subjects": ["Math"]' in prompt
    assert '"hoursPerDay": 5.0' in prompt
    assert '"overloadDetected": true' in prompt
    assert "rebalancePlan" in prompt


def test_weekly_prompt_lists_required_key():
    client = fake_client('{"insight": "ok"}')
    remote = RemoteCoach(RemoteModel(Settings(api_key="sk-test-key"), client=client))
    remote.weekly_insight(WeeklySummaryInput(stress_trend="Up", burnout_level="High"))
    prompt = client.messages.calls[0]["messages"][0]["content"]
    assert '"stressTrend": "Up"' in prompt
    assert "Return JSON with key: insight (string)." in prompt
