"""Tool invocation boundary: contract, adapters and retry."""

from .invoker import (
    ToolInvoker,
    Tool,
    Server,
)
from .retry import (
    RetryConfig,
    RetryStats,
    calculate_backoff,
    invoke_with_retry,
    is_retryable,
)
from .schema import (
    is_valid_type,
    validate_arguments,
)
from .registry import (
    ToolRegistry,
)
from .http_invoker import (
    HttpToolInvoker,
    extract_text_content,
)

__all__ = [
    # Contract
    "ToolInvoker",
    "Tool",
    "Server",
    # Retry
    "RetryConfig",
    "RetryStats",
    "calculate_backoff",
    "invoke_with_retry",
    "is_retryable",
    # Schema
    "is_valid_type",
    "validate_arguments",
    # Adapters
    "ToolRegistry",
    "HttpToolInvoker",
    "extract_text_content",
]
