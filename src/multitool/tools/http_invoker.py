"""HTTP tool adapter.

Calls tools exposed by a remote tool server:

    POST {base_url}/servers/{server_id}/tools/{tool_name}
    {"arguments": {...}}

and expects an MCP-style call result:

    {"content": [{"type": "text", "text": "..."}], "isError": false}

``isError`` and 4xx responses are logical failures. 429/5xx responses and
transport errors are faults and go through the bounded retry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from multitool.config.defaults import (
    TOOL_HTTP_CONNECT_TIMEOUT,
    TOOL_HTTP_READ_TIMEOUT,
    TOOL_HTTP_RETRYABLE_STATUS_CODES,
)
from multitool.errors import ToolInvocationFault
from multitool.plan.models import StepResult
from multitool.tools.invoker import Tool
from multitool.tools.retry import RetryConfig, invoke_with_retry
from multitool.tools.schema import validate_arguments

logger = logging.getLogger(__name__)


def _safe_snippet(text: str, n: int = 200) -> str:
    return (text or "")[:n].replace("\n", "\\n")


def extract_text_content(content: Any) -> str:
    """Pick the first non-blank text item from an MCP content list."""
    if not content:
        return "No content returned"
    if isinstance(content, str):
        return content
    for item in content:
        if isinstance(item, dict) and item.get("type", "text") == "text":
            text = item.get("text")
            if isinstance(text, str) and text.strip():
                return text
    return "No text content found"


class HttpToolInvoker:
    """ToolInvoker that calls a remote tool server over HTTP."""

    def __init__(
        self,
        base_url: str,
        retry_config: Optional[RetryConfig] = None,
        connect_timeout: float = TOOL_HTTP_CONNECT_TIMEOUT,
        read_timeout: float = TOOL_HTTP_READ_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        tools: Optional[Iterable[Tool]] = None,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the invoker.

        Args:
            base_url: Root URL of the tool server
            retry_config: Retry policy for transport faults
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            headers: Extra request headers (e.g. auth)
            tools: Optional tool catalogue used to validate arguments locally
            client: Pre-built httpx client (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            headers=headers,
        )
        self._catalogue: Dict[str, Tool] = {}
        for tool in tools or []:
            self._catalogue[f"{tool.server_id}:{tool.name}"] = tool

    def invoke(self, server_id: str, tool_name: str, args: Dict[str, Any]) -> StepResult:
        if not server_id or not tool_name:
            return StepResult.fail("Server id and tool name are required")

        arguments = dict(args or {})
        if self._catalogue:
            tool = self._catalogue.get(f"{server_id}:{tool_name}")
            if tool is None:
                return StepResult.fail(f"Tool not found: {tool_name}")
            converted, error = validate_arguments(tool.input_schema, arguments)
            if error is not None:
                return StepResult.fail(error)
            arguments = converted

        return invoke_with_retry(
            lambda: self._post(server_id, tool_name, arguments),
            config=self.retry_config,
            label=f"{server_id}:{tool_name}",
        )

    def list_tools(self) -> List[Tool]:
        """Tools from the local catalogue."""
        return list(self._catalogue.values())

    def _post(self, server_id: str, tool_name: str, arguments: Dict[str, Any]) -> StepResult:
        url = f"{self.base_url}/servers/{server_id}/tools/{tool_name}"
        logger.debug(f"POST {url}")
        response = self._client.post(url, json={"arguments": arguments})

        if response.status_code in TOOL_HTTP_RETRYABLE_STATUS_CODES:
            raise ToolInvocationFault(
                f"Tool server transient {response.status_code}: {_safe_snippet(response.text)}",
                status_code=response.status_code,
            )
        if response.status_code == 404:
            return StepResult.fail(f"Tool not found: {server_id}:{tool_name}")
        if response.status_code >= 400:
            return StepResult.fail(f"Tool server error {response.status_code}: {_safe_snippet(response.text)}")

        try:
            data = response.json()
        except ValueError as e:
            raise ToolInvocationFault(f"Unreadable tool server response: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ToolInvocationFault(f"Unexpected tool server response: {_safe_snippet(str(data))}")

        text = extract_text_content(data.get("content"))
        if data.get("isError"):
            return StepResult.fail(f"Tool execution failed: {text}")
        return StepResult.ok(text)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpToolInvoker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
