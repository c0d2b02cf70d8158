"""Configuration constants for multitool."""

from .defaults import (
    ENGINE_CHAIN_INPUT_KEY,
    ENGINE_MAX_ITERATIONS,
    ENGINE_MAX_WORKERS,
    ENGINE_THREAD_PREFIX,
    GEMINI_DEFAULT_API_URL,
    GEMINI_DEFAULT_MODEL,
    ITERATION_STOP_KEYWORDS,
    LLM_CONNECT_TIMEOUT,
    LLM_DEFAULT_API_URL,
    LLM_DEFAULT_MAX_TOKENS,
    LLM_DEFAULT_MODEL,
    LLM_DEFAULT_PROVIDER,
    LLM_DEFAULT_TEMPERATURE,
    LLM_PROVIDERS,
    LLM_READ_TIMEOUT,
    TOOL_BACKOFF_UNIT_SECONDS,
    TOOL_HTTP_CONNECT_TIMEOUT,
    TOOL_HTTP_READ_TIMEOUT,
    TOOL_HTTP_RETRYABLE_STATUS_CODES,
    TOOL_MAX_ATTEMPTS,
)

__all__ = [
    "ENGINE_CHAIN_INPUT_KEY",
    "ENGINE_MAX_ITERATIONS",
    "ENGINE_MAX_WORKERS",
    "ENGINE_THREAD_PREFIX",
    "GEMINI_DEFAULT_API_URL",
    "GEMINI_DEFAULT_MODEL",
    "ITERATION_STOP_KEYWORDS",
    "LLM_CONNECT_TIMEOUT",
    "LLM_DEFAULT_API_URL",
    "LLM_DEFAULT_MAX_TOKENS",
    "LLM_DEFAULT_MODEL",
    "LLM_DEFAULT_PROVIDER",
    "LLM_DEFAULT_TEMPERATURE",
    "LLM_PROVIDERS",
    "LLM_READ_TIMEOUT",
    "TOOL_BACKOFF_UNIT_SECONDS",
    "TOOL_HTTP_CONNECT_TIMEOUT",
    "TOOL_HTTP_READ_TIMEOUT",
    "TOOL_HTTP_RETRYABLE_STATUS_CODES",
    "TOOL_MAX_ATTEMPTS",
]
