"""
Planner collaborator: a text-in, text-out LLM call.

The engine uses it for two narrow decisions: whether an ITERATIVE plan
should keep looping, and how to combine results when a plan carries an
aggregation directive.

Two providers are supported:
- ``groq``: OpenAI-compatible ``/chat/completions`` (ChatPlanner)
- ``gemini``: Google Generative Language ``generateContent`` (GeminiPlanner)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx

from multitool.config.defaults import (
    GEMINI_DEFAULT_API_URL,
    GEMINI_DEFAULT_MODEL,
    LLM_CONNECT_TIMEOUT,
    LLM_DEFAULT_API_URL,
    LLM_DEFAULT_MAX_TOKENS,
    LLM_DEFAULT_MODEL,
    LLM_DEFAULT_TEMPERATURE,
    LLM_PROVIDERS,
    LLM_READ_TIMEOUT,
)
from multitool.errors import PlannerError

logger = logging.getLogger(__name__)


@runtime_checkable
class Planner(Protocol):
    """Protocol for the planner collaborator."""

    def ask(self, prompt: str) -> str:
        ...


def _safe_snippet(text: str, n: int = 200) -> str:
    return (text or "")[:n].replace("\n", "\\n").replace("\r", "\\r")


class _HttpPlanner:
    """Shared HTTP plumbing for planner providers."""

    provider = "llm"

    def __init__(
        self,
        api_key: str,
        model: str,
        api_url: str,
        system: Optional[str] = None,
        temperature: float = LLM_DEFAULT_TEMPERATURE,
        max_tokens: int = LLM_DEFAULT_MAX_TOKENS,
        client: Optional[httpx.Client] = None,
    ):
        if not api_key or not api_key.strip():
            raise ValueError("API key is required")
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.system = system
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(LLM_READ_TIMEOUT, connect=LLM_CONNECT_TIMEOUT)
        )

    def ask(self, prompt: str) -> str:
        """Send one prompt and return the trimmed answer text.

        Raises:
            ValueError: If the prompt is blank.
            PlannerError: On transport errors, HTTP errors or a malformed response.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        try:
            resp = self._send(prompt)
        except httpx.HTTPError as e:
            logger.warning(f"{self.provider} planner call failed: {e}")
            raise PlannerError(f"Network error while calling planner: {e}", cause=e) from e

        if resp.status_code >= 400:
            raise PlannerError(f"Planner API {resp.status_code}: {self._error_message(resp)}")

        try:
            content = self._extract(resp.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise PlannerError(f"Unexpected planner response: {_safe_snippet(resp.text)}", cause=e) from e

        answer = (content or "").strip()
        logger.debug(f"{self.provider} planner answered {len(answer)} chars")
        return answer

    def _send(self, prompt: str) -> httpx.Response:
        raise NotImplementedError

    def _extract(self, data: Any) -> str:
        raise NotImplementedError

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return _safe_snippet(resp.text)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ChatPlanner(_HttpPlanner):
    """Planner backed by an OpenAI-compatible chat completions endpoint (Groq by default)."""

    provider = "groq"

    def __init__(
        self,
        api_key: str,
        model: str = LLM_DEFAULT_MODEL,
        api_url: str = LLM_DEFAULT_API_URL,
        system: Optional[str] = None,
        temperature: float = LLM_DEFAULT_TEMPERATURE,
        max_tokens: int = LLM_DEFAULT_MAX_TOKENS,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(api_key, model, api_url, system, temperature, max_tokens, client)

    def _send(self, prompt: str) -> httpx.Response:
        messages = []
        if self.system:
            messages.append({"role": "system", "content": self.system})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        return self._client.post(
            self.api_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
        )

    def _extract(self, data: Any) -> str:
        return data["choices"][0]["message"]["content"]


class GeminiPlanner(_HttpPlanner):
    """Planner backed by Google Gemini's ``generateContent`` endpoint."""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = GEMINI_DEFAULT_MODEL,
        api_url: str = GEMINI_DEFAULT_API_URL,
        system: Optional[str] = None,
        temperature: float = LLM_DEFAULT_TEMPERATURE,
        max_tokens: int = LLM_DEFAULT_MAX_TOKENS,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(api_key, model, api_url, system, temperature, max_tokens, client)

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent"

    def _send(self, prompt: str) -> httpx.Response:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if self.system:
            payload["systemInstruction"] = {"parts": [{"text": self.system}]}

        return self._client.post(self.endpoint, params={"key": self.api_key}, json=payload)

    def _extract(self, data: Any) -> str:
        candidates = data.get("candidates")
        if not candidates:
            raise ValueError("No candidates in response")
        return candidates[0]["content"]["parts"][0]["text"]


def create_planner(
    provider: str,
    api_key: str,
    model: Optional[str] = None,
    api_url: Optional[str] = None,
    **kwargs,
) -> _HttpPlanner:
    """Build the planner for ``provider`` (``groq`` or ``gemini``).

    ``model`` and ``api_url`` fall back to the provider's defaults.

    Raises:
        ValueError: On an unknown provider or a blank API key.
    """
    name = (provider or "").strip().lower()
    if name == "groq":
        planner_cls = ChatPlanner
        model = model or LLM_DEFAULT_MODEL
        api_url = api_url or LLM_DEFAULT_API_URL
    elif name == "gemini":
        planner_cls = GeminiPlanner
        model = model or GEMINI_DEFAULT_MODEL
        api_url = api_url or GEMINI_DEFAULT_API_URL
    else:
        raise ValueError(f"Unknown planner provider: {provider!r}. Supported: {', '.join(LLM_PROVIDERS)}")

    logger.debug(f"Using {name} planner with model {model}")
    return planner_cls(api_key, model=model, api_url=api_url, **kwargs)
