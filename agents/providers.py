# agents/providers.py
"""
IronLog — LLM Provider Clients
==============================
Thin text-completion clients for the remote parsing tiers.

  - GeminiProvider: google-genai SDK
  - GroqProvider:   OpenAI-compatible chat completions over requests

Both expose `name` and `complete(prompt) -> str` and raise ProviderError for
every failure (HTTP status, timeout, transport, empty body). Credentials are
read each time get_configured_providers() is called.
"""

import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv
from google import genai
from google.genai import types as genai_types

from tools.schemas import Source

load_dotenv()


# =============================================================================
# CONFIGURATION
# =============================================================================
def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"⚠️ Providers: {name}={raw!r} is not a number, using {default}")
        return default


AI_CONFIG: Dict[str, Any] = {
    "gemini_model": os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
    "groq_model": os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"),
    "groq_url": "https://api.groq.com/openai/v1/chat/completions",
    "timeout_seconds": _env_float("AI_TIMEOUT_SECONDS", 20),
    "temperature": _env_float("AI_TEMPERATURE", 0.1),
    "max_tokens": int(_env_float("AI_MAX_TOKENS", 2048)),
    "system_prompt": (
        "You are a structured data parser. Always respond with valid JSON only. "
        "No markdown, no explanations."
    ),
}


def gemini_api_key() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


def groq_api_key() -> Optional[str]:
    return os.getenv("GROQ_API_KEY")


class ProviderError(Exception):
    """A provider call failed; the resolver moves on to the next tier."""


# =============================================================================
# PROVIDER: Gemini
# =============================================================================
class GeminiProvider:
    name = Source.GEMINI.value

    def __init__(self, api_key: str, model: Optional[str] = None):
        self.model = model or AI_CONFIG["gemini_model"]
        self.client = genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(
                timeout=int(AI_CONFIG["timeout_seconds"] * 1000)
            ),
        )

    def complete(self, prompt: str) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[prompt],
                config=genai_types.GenerateContentConfig(
                    temperature=AI_CONFIG["temperature"],
                    max_output_tokens=AI_CONFIG["max_tokens"],
                ),
            )
        except Exception as e:
            raise ProviderError(f"request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise ProviderError("empty response")
        return text


# =============================================================================
# PROVIDER: Groq
# =============================================================================
class GroqProvider:
    name = Source.GROQ.value

    def __init__(self, api_key: str, model: Optional[str] = None, session: Any = None):
        self.api_key = api_key
        self.model = model or AI_CONFIG["groq_model"]
        self.http = session or requests

    def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": AI_CONFIG["system_prompt"]},
                {"role": "user", "content": prompt},
            ],
            "temperature": AI_CONFIG["temperature"],
            "max_tokens": AI_CONFIG["max_tokens"],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            r = self.http.post(
                AI_CONFIG["groq_url"],
                headers=headers,
                json=payload,
                timeout=AI_CONFIG["timeout_seconds"],
            )
        except requests.exceptions.Timeout as e:
            raise ProviderError("timed out") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"request failed: {e}") from e

        if not 200 <= r.status_code < 300:
            raise ProviderError(f"HTTP {r.status_code}")

        try:
            text = r.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("unexpected response body") from e

        if not isinstance(text, str) or not text.strip():
            raise ProviderError("empty response")
        return text


# =============================================================================
# REGISTRY
# =============================================================================
def get_configured_providers() -> List[Any]:
    """Providers with credentials present, in priority order (Gemini, then Groq)."""
    providers: List[Any] = []

    key = gemini_api_key()
    if key:
        providers.append(GeminiProvider(key))

    key = groq_api_key()
    if key:
        providers.append(GroqProvider(key))

    return providers


def provider_status() -> Dict[str, bool]:
    return {
        Source.GEMINI.value: bool(gemini_api_key()),
        Source.GROQ.value: bool(groq_api_key()),
    }


_status = provider_status()
print(f"🤖 Providers: Gemini={_status['gemini']}, Groq={_status['groq']}")


__all__ = [
    "AI_CONFIG",
    "ProviderError",
    "GeminiProvider",
    "GroqProvider",
    "get_configured_providers",
    "provider_status",
]
