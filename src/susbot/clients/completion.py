"""OpenAI-compatible chat completion client used for explanations."""

from __future__ import annotations

import logging

import httpx

from susbot.config import ExplanationConfig
from susbot.constants.explain import CHAT_COMPLETIONS_PATH, MAX_COMPLETION_TOKENS, SYSTEM_PROMPT
from susbot.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

SERVICE_NAME: str = "explanation"


class ChatCompletionClient:
    """Send one prompt and return the first choice's text."""

    def __init__(
        self,
        settings: ExplanationConfig,
        *,
        timeout: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> ChatCompletionClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def complete(self, prompt: str) -> str:
        """Return the completion for *prompt*."""
        body = {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": MAX_COMPLETION_TOKENS,
        }
        headers = {"Authorization": f"Bearer {self._settings.api_key}"}
        try:
            response = self._client.post(
                f"{self._settings.base_url}{CHAT_COMPLETIONS_PATH}",
                json=body,
                headers=headers,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(SERVICE_NAME, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailableError(SERVICE_NAME, f"invalid JSON response: {exc}") from exc

        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices:
            raise UpstreamUnavailableError(SERVICE_NAME, "response contained no choices")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise UpstreamUnavailableError(SERVICE_NAME, "response contained no text")
        logger.debug("Explanation service returned %d characters", len(content))
        return content
