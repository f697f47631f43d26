"""LLM gateway service using LiteLLM."""
from __future__ import annotations

from typing import Any

from knownet.config.settings import LLMConfig

SUPPORTED_PROVIDERS = ("openai", "ollama", "lmstudio")


class LLMServiceError(RuntimeError):
    """Raised when the LLM provider fails."""


class LLMService:
    """LLM wrapper supporting remote and local OpenAI-compatible providers."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def provider(self) -> str:
        return self._config.provider.lower()

    def completion(
        self,
        *,
        messages: list[dict[str, str]],
        provider: str | None = None,
        model_name: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        provider_value = (provider or self._config.provider).lower()
        model = self._resolve_model(provider_value, model_name)

        from litellm import completion

        extra: dict[str, Any] = {"timeout": self._config.timeout_seconds}
        resolved_temperature = self._config.temperature if temperature is None else temperature
        extra["temperature"] = resolved_temperature
        resolved_max_tokens = max_tokens if max_tokens is not None else self._config.max_tokens
        if resolved_max_tokens is not None:
            extra["max_tokens"] = resolved_max_tokens
        if self._config.api_base and provider_value != "openai":
            extra["api_base"] = self._config.api_base
        if self._config.api_key:
            extra["api_key"] = self._config.api_key
        elif provider_value == "lmstudio":
            # LM Studio ignores the key but the OpenAI client insists on one.
            extra["api_key"] = "lm-studio"
        if response_format is not None:
            extra["response_format"] = response_format

        try:
            response = completion(model=model, messages=messages, stream=False, **extra)
        except Exception as exc:
            raise self._wrap_error(provider_value, exc) from exc

        content = _extract_response_text(response)
        if not content:
            raise LLMServiceError("LLM response contained no content.")
        return content

    def _resolve_model(self, provider_value: str, model_name: str | None) -> str:
        if provider_value not in SUPPORTED_PROVIDERS:
            raise ValueError("provider must be one of: " + ", ".join(SUPPORTED_PROVIDERS))

        resolved = model_name or self._config.model
        if not resolved:
            raise ValueError("model_name must be provided or configured for this provider.")

        if provider_value == "ollama" and not resolved.startswith("ollama/"):
            return f"ollama/{resolved}"
        if provider_value == "lmstudio" and not resolved.startswith("openai/"):
            # LM Studio speaks the OpenAI wire protocol at api_base.
            return f"openai/{resolved}"

        return resolved

    def _wrap_error(self, provider_value: str, exc: Exception) -> LLMServiceError:
        if provider_value == "ollama":
            return LLMServiceError("Ollama provider unreachable or returned an error.")
        if provider_value == "lmstudio":
            return LLMServiceError(
                f"LM Studio server at {self._config.api_base} unreachable or returned an error."
            )
        return LLMServiceError(f"LLM request failed: {exc}")


def _extract_response_text(response: Any) -> str:
    if isinstance(response, dict):
        choices = response.get("choices") or []
    else:
        choices = getattr(response, "choices", []) or []

    if not choices:
        return ""

    first = choices[0]
    if isinstance(first, dict):
        message = first.get("message") or {}
        return message.get("content") or first.get("text") or ""

    message = getattr(first, "message", None)
    if message is not None:
        return getattr(message, "content", "") or ""
    return getattr(first, "text", "") or ""
