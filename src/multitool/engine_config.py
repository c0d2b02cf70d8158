"""Runtime configuration for the execution engine and its adapters.

Values come from ``MULTITOOL_*`` environment variables (a ``.env`` file in the
working directory is loaded first) and fall back to ``multitool.config``.
"""

from __future__ import annotations

import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from multitool.config.defaults import (
    ENGINE_CHAIN_INPUT_KEY,
    ENGINE_MAX_ITERATIONS,
    ENGINE_MAX_WORKERS,
    LLM_DEFAULT_PROVIDER,
    TOOL_BACKOFF_UNIT_SECONDS,
    TOOL_HTTP_CONNECT_TIMEOUT,
    TOOL_HTTP_READ_TIMEOUT,
    TOOL_MAX_ATTEMPTS,
)


def _provider_api_key(provider: str) -> Optional[str]:
    """Provider-specific key variables, used when MULTITOOL_LLM_API_KEY is unset."""
    if provider == "gemini":
        return os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY") or None
    return os.environ.get("GROQ_API_KEY") or None


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass
class EngineConfig:
    """Configuration for plan execution."""

    max_iterations: int = ENGINE_MAX_ITERATIONS
    chain_input_key: str = ENGINE_CHAIN_INPUT_KEY
    max_workers: Optional[int] = ENGINE_MAX_WORKERS

    # Tool invocation
    tool_max_attempts: int = TOOL_MAX_ATTEMPTS
    tool_backoff_unit: float = TOOL_BACKOFF_UNIT_SECONDS
    tool_connect_timeout: float = TOOL_HTTP_CONNECT_TIMEOUT
    tool_read_timeout: float = TOOL_HTTP_READ_TIMEOUT
    tools_url: Optional[str] = None

    # Planner (model and URL default per provider when None)
    llm_provider: str = LLM_DEFAULT_PROVIDER
    llm_api_url: Optional[str] = None
    llm_model: Optional[str] = None
    llm_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        load_dotenv(Path.cwd() / ".env")
        provider = os.environ.get("MULTITOOL_LLM_PROVIDER", LLM_DEFAULT_PROVIDER).strip().lower()
        return cls(
            max_iterations=int(os.environ.get("MULTITOOL_MAX_ITERATIONS", str(ENGINE_MAX_ITERATIONS))),
            chain_input_key=os.environ.get("MULTITOOL_CHAIN_INPUT_KEY", ENGINE_CHAIN_INPUT_KEY),
            max_workers=_optional_int(os.environ.get("MULTITOOL_MAX_WORKERS")),
            tool_max_attempts=int(os.environ.get("MULTITOOL_TOOL_MAX_ATTEMPTS", str(TOOL_MAX_ATTEMPTS))),
            tool_backoff_unit=float(os.environ.get("MULTITOOL_TOOL_BACKOFF_UNIT", str(TOOL_BACKOFF_UNIT_SECONDS))),
            tool_connect_timeout=float(os.environ.get("MULTITOOL_TOOL_CONNECT_TIMEOUT", str(TOOL_HTTP_CONNECT_TIMEOUT))),
            tool_read_timeout=float(os.environ.get("MULTITOOL_TOOL_READ_TIMEOUT", str(TOOL_HTTP_READ_TIMEOUT))),
            tools_url=os.environ.get("MULTITOOL_TOOLS_URL") or None,
            llm_provider=provider,
            llm_api_url=os.environ.get("MULTITOOL_LLM_API_URL") or None,
            llm_model=os.environ.get("MULTITOOL_LLM_MODEL") or None,
            llm_api_key=os.environ.get("MULTITOOL_LLM_API_KEY") or _provider_api_key(provider),
        )


# Global config instance
_config: Optional[EngineConfig] = None


def get_engine_config() -> EngineConfig:
    """Get global engine config."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def set_engine_config(config: Optional[EngineConfig]) -> None:
    """Set global engine config (``None`` forces a reload from the environment)."""
    global _config
    _config = config
