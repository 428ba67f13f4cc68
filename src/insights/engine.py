"""AI study insights personalized by the user's learned habits."""

import json
import re

import structlog

from cli.retry import llm_retry
from habits.context import PersonalizationContextBuilder
from habits.models import Task
from habits.queries import HabitQueryService
from llm import LLMError as BaseLLMError
from llm import LLMProvider, LLMRateLimitError, create_llm_provider
from observability import metrics

from .prompts import PromptTemplates

logger = structlog.get_logger()

CHAT_HISTORY_LIMIT = 10

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class InsightsError(Exception):
    """Base exception for insights errors."""


class APIKeyMissingError(InsightsError):
    """Raised when no LLM provider could be configured."""


def parse_json_response(text: str):
    """Parse model output as JSON, tolerating a markdown code fence. None if invalid."""
    cleaned = (text or "").strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        cleaned = match.group(1)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        return None


def _task_payload(task: Task | dict) -> dict:
    return task.to_dict() if isinstance(task, Task) else dict(task)


def _tasks_json(tasks: list[Task | dict]) -> str:
    return json.dumps([_task_payload(t) for t in tasks], default=str)


class InsightsEngine:
    """Task suggestions, deadline prediction, schedule optimization and chat."""

    def __init__(
        self,
        queries: HabitQueryService,
        api_key: str | None = None,
        model: str | None = None,
        provider: str | None = None,
        client=None,
        llm: LLMProvider | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ):
        self.context_builder = PersonalizationContextBuilder(queries)
        self.max_tokens = max_tokens
        self.temperature = temperature

        if llm is not None:
            self.llm = llm
            return
        try:
            self.llm = create_llm_provider(
                provider=provider,
                api_key=api_key,
                model=model,
                client=client,
            )
        except BaseLLMError as e:
            raise APIKeyMissingError(str(e)) from e

    @llm_retry(max_attempts=3, min_wait=2.0, max_wait=30.0, exceptions=(LLMRateLimitError,))
    def _generate(self, system: str, messages: list[dict], max_tokens: int) -> str:
        return self.llm.generate(
            messages=messages,
            system=system,
            max_tokens=max_tokens,
            temperature=self.temperature,
        )

    def _call_llm(
        self,
        system: str,
        user_prompt: str,
        history: list[dict] | None = None,
        max_tokens: int | None = None,
    ) -> str:
        messages = list(history or [])
        messages.append({"role": "user", "content": user_prompt})
        metrics.counter("insights.llm_calls")
        try:
            with metrics.timer("insights.llm_latency"):
                return self._generate(system, messages, max_tokens or self.max_tokens)
        except BaseLLMError as e:
            metrics.counter("insights.llm_failures")
            logger.error("insights.llm_failed", provider=self.llm.provider_name, error=str(e))
            raise InsightsError(str(e)) from e

    def suggest_tasks(self, user_id: str, tasks: list[Task | dict]) -> list[dict]:
        """3-5 suggested tasks. Unparsable model output yields []."""
        prompt = PromptTemplates.SUGGEST_TASKS.format(
            profile=self.context_builder.build_for_user(user_id),
            tasks=_tasks_json(tasks),
        )
        response = self._call_llm(PromptTemplates.SUGGEST_SYSTEM, prompt)
        parsed = parse_json_response(response)
        if not isinstance(parsed, list):
            logger.warning("insights.unparsable_suggestions", user_id=user_id)
            return []
        return [s for s in parsed if isinstance(s, dict)]

    def predict_deadline(
        self, user_id: str, task: Task | dict, tasks: list[Task | dict]
    ) -> dict:
        prompt = PromptTemplates.PREDICT_DEADLINE.format(
            profile=self.context_builder.build_for_user(user_id),
            task=json.dumps(_task_payload(task), default=str),
            tasks=_tasks_json(tasks),
        )
        response = self._call_llm(PromptTemplates.DEADLINE_SYSTEM, prompt)
        parsed = parse_json_response(response)
        if not isinstance(parsed, dict):
            return {"error": "Failed to parse AI response", "raw_response": response}
        return {
            "suggested_deadline": parsed.get("suggestedDeadline", parsed.get("suggested_deadline")),
            "reasoning": parsed.get("reasoning", ""),
            "confidence": parsed.get("confidence", "Low"),
        }

    def optimize_schedule(self, user_id: str, tasks: list[Task | dict]) -> dict:
        """7-day schedule over incomplete tasks only."""
        pending = [t for t in tasks if not _task_payload(t).get("completed")]
        prompt = PromptTemplates.OPTIMIZE_SCHEDULE.format(
            profile=self.context_builder.build_for_user(user_id),
            tasks=_tasks_json(pending),
        )
        response = self._call_llm(PromptTemplates.SCHEDULE_SYSTEM, prompt)
        parsed = parse_json_response(response)
        if not isinstance(parsed, dict):
            return {"error": "Failed to parse AI response", "raw_response": response}
        return {
            "schedule": parsed.get("schedule", []),
            "tips": parsed.get("tips", []),
            "total_study_hours": parsed.get("totalStudyHours", parsed.get("total_study_hours", 0)),
        }

    def chat(self, user_id: str, message: str, history: list[dict] | None = None) -> dict:
        """Study-assistant chat turn. Keeps the last 10 history messages."""
        if not message or not message.strip():
            raise ValueError("Message is required and must be a non-empty string")
        system = PromptTemplates.CHAT_SYSTEM.format(
            profile=self.context_builder.build_for_user(user_id)
        )
        trimmed = list(history or [])[-CHAT_HISTORY_LIMIT:]
        response = self._call_llm(system, message, history=trimmed, max_tokens=500)
        return {"response": response, "provider": self.llm.display_name}
