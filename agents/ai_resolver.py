# agents/ai_resolver.py
"""
IronLog — Tiered AI Resolver
============================
Confidence-gated fallback shared by the food and workout pipelines:

    local parser  ->  Gemini  ->  Groq  ->  local result

A local result that is not "low" is returned as-is, with no network call.
Otherwise providers are tried one at a time, in priority order, until one
returns JSON that passes validation. Provider failures never escape; they
become diagnostics on the returned envelope.
"""

from typing import Any, Callable, List, Optional

from agents.providers import ProviderError, get_configured_providers
from tools.response_validator import ResponseValidationError, safe_json_parse
from tools.schemas import AIResponse, Confidence, Source

# Confidence attached to any validated provider result, for both pipelines.
AI_SUCCESS_CONFIDENCE = Confidence.MEDIUM


class TieredResolver:
    """
    Args:
        pipeline: Label used in status lines ("food", "workout")
        build_prompt: text -> prompt string
        validate: parsed JSON -> typed result, raising ResponseValidationError
        providers: Fixed provider list; None means read credentials per call
    """

    def __init__(
        self,
        pipeline: str,
        build_prompt: Callable[[str], str],
        validate: Callable[[Any], Any],
        providers: Optional[List[Any]] = None,
    ):
        self.pipeline = pipeline
        self.build_prompt = build_prompt
        self.validate = validate
        self._providers = providers

    def providers(self) -> List[Any]:
        if self._providers is not None:
            return list(self._providers)
        return get_configured_providers()

    def resolve(self, text: str, local_result: Any) -> AIResponse:
        if local_result.confidence != Confidence.LOW:
            return AIResponse(
                data=local_result,
                source=Source.LOCAL,
                confidence=local_result.confidence,
            )

        diagnostics: List[str] = []
        providers = self.providers()
        prompt = self.build_prompt(text)

        for provider in providers:
            data = self._try_provider(provider, prompt, diagnostics)
            if data is None:
                continue

            source = Source(provider.name)
            data = data.model_copy(update={
                "source": source,
                "confidence": AI_SUCCESS_CONFIDENCE,
            })
            print(f"✅ {self.pipeline.title()} parse: resolved by {provider.name}")
            return AIResponse(
                data=data,
                source=source,
                confidence=AI_SUCCESS_CONFIDENCE,
                diagnostics=diagnostics,
            )

        if providers:
            print(f"⚠️ {self.pipeline.title()} parse: all providers failed, using local result")

        return AIResponse(
            data=local_result,
            source=Source.LOCAL,
            confidence=local_result.confidence,
            diagnostics=diagnostics,
        )

    def _try_provider(self, provider: Any, prompt: str, diagnostics: List[str]) -> Any:
        """One provider attempt. Returns the validated result or None."""
        try:
            raw = provider.complete(prompt)
        except ProviderError as e:
            return self._soft_failure(provider, str(e), diagnostics)
        except Exception as e:
            return self._soft_failure(provider, f"unexpected error: {e}", diagnostics)

        payload = safe_json_parse(raw)
        if payload is None:
            return self._soft_failure(provider, "response was not valid JSON", diagnostics)

        try:
            return self.validate(payload)
        except ResponseValidationError as e:
            return self._soft_failure(provider, f"invalid payload: {e}", diagnostics)

    def _soft_failure(self, provider: Any, reason: str, diagnostics: List[str]) -> None:
        message = f"{provider.name}: {reason}"
        diagnostics.append(message)
        print(f"⚠️ {self.pipeline.title()} parse: {message}")
        return None


__all__ = [
    "TieredResolver",
    "AI_SUCCESS_CONFIDENCE",
]
