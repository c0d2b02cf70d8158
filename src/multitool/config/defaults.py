"""Default configuration values for multitool.

This module centralizes the hard-coded numbers (iteration ceilings, retry
bounds, timeouts, model names) used across the engine and its adapters.
Modules import these constants instead of hard-coding values.

Usage:
    from multitool.config import (
        ENGINE_MAX_ITERATIONS,
        TOOL_MAX_ATTEMPTS,
        TOOL_BACKOFF_UNIT_SECONDS,
    )
"""

from __future__ import annotations

# =============================================================================
# Engine Defaults
# =============================================================================

# Ceiling for ITERATIVE plans
ENGINE_MAX_ITERATIONS = 10

# Parameter key used by CHAINED plans for the implicit pipe
ENGINE_CHAIN_INPUT_KEY = "input"

# Worker pool size for PARALLEL/COMPETITIVE (None = ThreadPoolExecutor default)
ENGINE_MAX_WORKERS = None

# Thread name prefix for pool workers
ENGINE_THREAD_PREFIX = "multitool-step"


# =============================================================================
# Tool Invocation Retry Defaults
# =============================================================================

TOOL_MAX_ATTEMPTS = 2
TOOL_BACKOFF_UNIT_SECONDS = 1.0  # wait = unit * attempt


# =============================================================================
# HTTP Tool Transport Defaults
# =============================================================================

TOOL_HTTP_CONNECT_TIMEOUT = 10.0
TOOL_HTTP_READ_TIMEOUT = 15.0
TOOL_HTTP_RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


# =============================================================================
# Planner (LLM) Defaults
# =============================================================================

# Provider used when MULTITOOL_LLM_PROVIDER is unset
LLM_DEFAULT_PROVIDER = "groq"
LLM_PROVIDERS = ("groq", "gemini")

# OpenAI-compatible chat completions (Groq)
LLM_DEFAULT_API_URL = "https://api.groq.com/openai/v1/chat/completions"
LLM_DEFAULT_MODEL = "llama-3.1-8b-instant"

# Google Generative Language API (Gemini)
GEMINI_DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"

LLM_DEFAULT_TEMPERATURE = 0.1
LLM_DEFAULT_MAX_TOKENS = 1024
LLM_CONNECT_TIMEOUT = 10.0
LLM_READ_TIMEOUT = 30.0

# Answer keywords that end an ITERATIVE loop (matched case-insensitively)
ITERATION_STOP_KEYWORDS = ("stop", "complete")
