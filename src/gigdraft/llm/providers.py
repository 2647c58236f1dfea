from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from openai import OpenAI

from gigdraft.config import Settings
from gigdraft.errors import GenerationError, MalformedAIResponseError
from gigdraft.types import ModelResponse

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"```[A-Za-z]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```")


@dataclass(slots=True)
class ProviderConfig:
    name: str
    base_url: str
    api_key: str
    model: str
    timeout_sec: int


class CompletionClient:
    """Single-shot prompt in, text out. Keeps no conversation state between calls."""

    def __init__(self, config: ProviderConfig):
        self.config = config
        self._client: OpenAI | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionClient:
        return cls(
            ProviderConfig(
                name="gemini",
                base_url=settings.gemini_base_url,
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                timeout_sec=settings.gemini_timeout_sec,
            )
        )

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise GenerationError(f"No API key configured for provider {self.config.name}")
            self._client = OpenAI(
                base_url=self.config.base_url,
                api_key=self.config.api_key,
                timeout=float(self.config.timeout_sec),
                max_retries=0,
            )
        return self._client

    @client.setter
    def client(self, value: OpenAI) -> None:
        self._client = value

    def complete_text(self, prompt: str) -> ModelResponse:
        client = self.client
        try:
            response = client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as exc:
            logger.warning(
                "Completion call failed provider=%s model=%s: %s",
                self.config.name,
                self.config.model,
                exc,
            )
            raise GenerationError("Generative model request failed", details=str(exc)) from exc

        text = self._extract_chat_text(response)
        if not text.strip():
            raise GenerationError("Generative model returned an empty response")

        raw = response.model_dump() if hasattr(response, "model_dump") else {}
        if not isinstance(raw, dict):
            raw = {"raw": raw}
        raw["model"] = self.config.model
        return ModelResponse(content=text, raw=raw)

    @staticmethod
    def _extract_chat_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""

        message = getattr(choices[0], "message", None)
        if message is None:
            return ""

        content = getattr(message, "content", "")
        if isinstance(content, str):
            return content
        if content is None:
            return ""
        return str(content)


def strip_code_fences(content: str) -> str:
    candidate = content.strip()
    if "```" not in candidate:
        return candidate
    candidate = _FENCE_OPEN.sub("", candidate)
    candidate = _FENCE_CLOSE.sub("", candidate)
    return candidate.strip()


def parse_json_object(content: str) -> dict[str, Any]:
    candidate = strip_code_fences(content)
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.error("Model output is not valid JSON: %s\n--- raw response ---\n%s", exc, content)
        raise MalformedAIResponseError("AI response was not valid JSON") from exc

    if not isinstance(value, dict):
        logger.error("Model output is JSON but not an object\n--- raw response ---\n%s", content)
        raise MalformedAIResponseError("AI response was not a JSON object")
    return value
