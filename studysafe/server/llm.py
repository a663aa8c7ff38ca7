# server/llm.py
# ---------------------------------------------------------
# Remote generative model for the StudySafe engine.
#
#   RemoteModel   thin wrapper over the Anthropic client
#                 (complete(prompt) -> str | None, raises on failure)
#   RemoteCoach   one prompt per use case; returns parsed JSON
#                 dicts, or None when the model is unavailable
#
# Validation and fallback live in coach.py; nothing here decides
# what the caller finally sees.
# ---------------------------------------------------------

import json
import re
from typing import Any, Dict, Optional

from anthropic import Anthropic

from .config import Settings, load_settings
from .schemas import (
    FocusModeInput,
    OverloadResult,
    ReflectionInput,
    StressCheckInput,
    StudyPlanInput,
    WeeklySummaryInput,
)

SYSTEM_PROMPT = (
    "You are StudySafe AI, a supportive study and wellbeing assistant for students.\n"
    "You prioritize balance, safety, and encouragement.\n"
    "You never diagnose or replace professional help.\n"
    "You slow down productivity advice when stress is high."
)


# -------------------------------------------------------------------
# JSON recovery
# -------------------------------------------------------------------

def coerce_json(raw: str) -> Dict[str, Any]:
    """
    Models often wrap JSON in ```json fences or add extra prose.
    Strip fences and grab the first {...} block.
    """
    s = (raw or "").strip()

    if s.startswith("```"):
        lines = s.splitlines()
        if lines and lines[0].strip().startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        s = "\n".join(lines).strip()

    if not s.startswith("{"):
        m = re.search(r"\{.*\}", s, flags=re.S)
        if m:
            s = m.group(0)

    data = json.loads(s)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


# -------------------------------------------------------------------
# Client
# -------------------------------------------------------------------

class RemoteModel:
    """Single-attempt chat call; no retries, no engine-side timeout."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[Anthropic] = None,
    ):
        self.settings = settings or load_settings()
        self._client = client
        if self._client is None and self.settings.remote_enabled:
            self._client = Anthropic(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                max_retries=0,
            )

        if self._client is not None:
            print("[llm] Anthropic client initialized; key prefix:", self.settings.key_prefix)
            print("[llm] Using Anthropic model:", self.settings.model)
        else:
            print("[llm] No ANTHROPIC_API_KEY found. Using heuristic fallbacks.")

    @property
    def available(self) -> bool:
        return self._client is not None

    def complete(self, prompt: str) -> Optional[str]:
        if self._client is None:
            return None

        message = self._client.messages.create(
            model=self.settings.model,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return message.content[0].text if message.content else None


# -------------------------------------------------------------------
# Use-case prompts
# -------------------------------------------------------------------

def _as_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False)


class RemoteCoach:
    """Builds one prompt per use case and parses the model's JSON reply."""

    def __init__(self, model: Optional[RemoteModel] = None):
        self.model = model or RemoteModel()

    @property
    def available(self) -> bool:
        return self.model.available

    def _ask(self, prompt: str) -> Optional[Dict[str, Any]]:
        raw = self.model.complete(prompt)
        if not raw:
            return None
        print("[llm] raw JSON (first 200 chars):", raw[:200])
        return coerce_json(raw)

    def study_plan(
        self, payload: StudyPlanInput, overload: OverloadResult
    ) -> Optional[Dict[str, Any]]:
        data = payload.model_dump(by_alias=True)
        data["overloadDetected"] = overload.detected
        data["overloadNotes"] = list(overload.notes)
        prompt = (
            "Create a friendly study plan in JSON only.\n\n"
            f"Input:\n{_as_json(data)}\n\n"
            "Rules:\n"
            "- Never encourage over-studying\n"
            "- Always recommend breaks\n"
            "- If overloadDetected is true, suggest a rebalanced plan\n"
            "- Keep language simple and friendly\n\n"
            "Return JSON with keys: dailyPlan (array of strings), breakReminders (array), "
            "workloadWarning (string or null), coachMessage (short sentence), "
            "overloadDetected (boolean), overloadNotes (array), rebalancePlan (array, optional)."
        )
        return self._ask(prompt)

    def stress_check(self, payload: StressCheckInput) -> Optional[Dict[str, Any]]:
        prompt = (
            "Analyze student stress in JSON only.\n\n"
            f"Input:\n{_as_json(payload.model_dump(by_alias=True))}\n\n"
            "Rules:\n"
            "- If the student mentions self-harm, set redFlag to true, stressLevel to High, "
            "leave practicalAdvice empty and point them to a trusted adult or counselor\n"
            "- No medical claims\n\n"
            "Return JSON with keys: stressLevel (Low/Medium/High), supportiveMessage (string), "
            "practicalAdvice (array), sentimentScore (0-100), coachMessage (short sentence), "
            "redFlag (boolean), redFlagMessage (string)."
        )
        return self._ask(prompt)

    def focus_mode(self, payload: FocusModeInput) -> Optional[Dict[str, Any]]:
        prompt = (
            "Suggest focus and break minutes in JSON only.\n\n"
            f"Input:\n{_as_json(payload.model_dump(by_alias=True))}\n\n"
            "Rules:\n"
            "- Default focus 25 / break 5\n"
            "- Shorter focus and longer breaks if stress is High or Recovery Mode\n"
            "- Keep it simple\n\n"
            "Return JSON with keys: focusMinutes (number), breakMinutes (number), reason (string)."
        )
        return self._ask(prompt)

    def weekly_insight(self, payload: WeeklySummaryInput) -> Optional[Dict[str, Any]]:
        prompt = (
            "Write one short, supportive insight sentence in JSON only.\n\n"
            f"Input:\n{_as_json(payload.model_dump(by_alias=True))}\n\n"
            "Rules:\n"
            "- One sentence\n"
            "- Keep it encouraging\n"
            "- No medical claims\n\n"
            "Return JSON with key: insight (string)."
        )
        return self._ask(prompt)

    def reflection(self, payload: ReflectionInput) -> Optional[Dict[str, Any]]:
        prompt = (
            "Reply to a student reflection in JSON only.\n\n"
            f"Input:\n{_as_json(payload.model_dump(by_alias=True))}\n\n"
            "Rules:\n"
            "- Be supportive and calm\n"
            "- No medical claims\n"
            "- Keep it to 1-2 sentences\n\n"
            "Return JSON with key: supportiveReply (string)."
        )
        return self._ask(prompt)
