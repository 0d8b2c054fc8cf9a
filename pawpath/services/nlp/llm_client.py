"""LLM adapter that asks OpenAI to choose walking waypoints."""
from __future__ import annotations

import logging
from typing import Any, Optional

import openai

from pawpath.config import Settings, settings

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Language-model failure classified for the user.

    ``kind`` is one of ``configuration``, ``quota``, ``malformed_output`` or
    ``unavailable``.
    """

    def __init__(self, message: str, *, kind: str) -> None:
        super().__init__(message)
        self.kind = kind


class WaypointLLMClient:
    """Thin wrapper around the OpenAI chat completions API in JSON mode."""

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        client: Any = None,
        config: Settings = settings,
    ) -> None:
        self._config = config
        self._model = model or config.openai_model
        self._client = client

    @property
    def client(self) -> Any:
        # Built on first use so a missing key is reported per request
        if self._client is None:
            self._client = self._build_client(self._config)
        return self._client

    @staticmethod
    def _build_client(config: Settings) -> Any:
        if not config.openai_api_key:
            raise LLMServiceError("OPENAI_API_KEY is not configured.", kind="configuration")

        return openai.OpenAI(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url or None,
            timeout=config.http_timeout_seconds,
            max_retries=config.http_max_retries,
        )

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Run one completion and return the raw text of the first choice."""
        try:
            response = self.client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise LLMServiceError(str(exc), kind="configuration") from exc
        except openai.RateLimitError as exc:
            raise LLMServiceError(str(exc), kind="quota") from exc
        except openai.APIError as exc:
            raise LLMServiceError(str(exc), kind="unavailable") from exc

        text = self._extract_text(response)
        if not text:
            raise LLMServiceError("No response content from the model", kind="malformed_output")
        return text

    @staticmethod
    def _extract_text(response: Any) -> Optional[str]:
        data = response if isinstance(response, dict) else response.model_dump()

        choices = data.get("choices") or []
        if not choices:
            return None

        content = (choices[0].get("message") or {}).get("content")
        if isinstance(content, str):
            return content.strip() or None
        return None
