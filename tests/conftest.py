"""Shared fixtures for the StudySafe test suite."""

import json

import pytest

from studysafe.server import coach
from studysafe.server.llm import RemoteCoach
from studysafe.server.schemas import StudyPlanInput


class FakeModel:
    """Stand-in for RemoteModel: canned reply, or an exception to raise."""

    def __init__(self, reply=None, error=None):
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        self.reply = reply
        self.error = error
        self.prompts = []

    @property
    def available(self):
        return self.reply is not None or self.error is not None

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


# ── Remote model ────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def offline_coach(monkeypatch):
    """Never reach the network: the module-wide coach has no model behind it."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr(coach, "_remote_coach", RemoteCoach(FakeModel()))


@pytest.fixture
def remote_with():
    """Factory fixture returning (RemoteCoach, FakeModel).

    Usage:
        remote, model = remote_with({"insight": "Nice week."})
        remote, model = remote_with(error=RuntimeError("boom"))
    """
    def _factory(reply=None, error=None):
        model = FakeModel(reply=reply, error=error)
        return RemoteCoach(model), model

    return _factory


# ── Inputs ──────────────────────────────────────────────────────────────

@pytest.fixture
def make_plan_input():
    """Factory fixture for StudyPlanInput with calm defaults."""
    def _factory(**overrides):
        defaults = {
            "subjects": ["Math", "Science"],
            "deadlines": "",
            "hours_per_day": 2,
            "self_stress_level": 2,
            "mode": "Normal Week",
        }
        defaults.update(overrides)
        return StudyPlanInput(**defaults)

    return _factory
