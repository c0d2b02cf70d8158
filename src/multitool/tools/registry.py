"""In-process tool registry implementing the ToolInvoker contract."""

from typing import Any, Callable, Dict, List, Optional
import logging
import threading

from multitool.plan.models import StepResult
from .invoker import Server, Tool
from .retry import RetryConfig, invoke_with_retry
from .schema import validate_arguments

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Tool registry backed by plain Python callables.

    Each tool is a callable taking keyword arguments. It may return a string,
    a ``StepResult``, or any other value (stringified). Raising a transport
    fault (``ToolInvocationFault``, ``ConnectionError``, ``TimeoutError``)
    triggers the bounded retry.
    """

    def __init__(self, retry_config: Optional[RetryConfig] = None):
        self.retry_config = retry_config or RetryConfig()
        self._servers: Dict[str, Server] = {}
        self._handlers: Dict[str, Callable[..., Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(server_id: str, tool_name: str) -> str:
        return f"{server_id}:{tool_name}"

    def register_server(self, server_id: str, name: str = "", connected: bool = True) -> Server:
        with self._lock:
            server = self._servers.get(server_id)
            if server is None:
                server = Server(id=server_id, name=name or server_id, connected=connected)
                self._servers[server_id] = server
            return server

    def register_tool(
        self,
        server_id: str,
        tool_name: str,
        handler: Callable[..., Any],
        description: str = "",
        input_schema: Optional[Dict[str, Any]] = None,
    ) -> Tool:
        server = self.register_server(server_id)
        tool = Tool(
            name=tool_name,
            server_id=server_id,
            description=description,
            input_schema=dict(input_schema or {}),
        )
        with self._lock:
            server.add_tool(tool)
            self._handlers[self._key(server_id, tool_name)] = handler
        logger.debug(f"Registered tool {server_id}:{tool_name}")
        return tool

    def tool(self, server_id: str, tool_name: Optional[str] = None, **kwargs):
        """Decorator form of ``register_tool``."""
        def decorator(func: Callable[..., Any]):
            self.register_tool(server_id, tool_name or func.__name__, func, **kwargs)
            return func
        return decorator

    def get_tool(self, server_id: str, tool_name: str) -> Optional[Tool]:
        server = self._servers.get(server_id)
        return server.get_tool(tool_name) if server else None

    def list_tools(self) -> List[Tool]:
        """All tools of connected servers."""
        return [
            tool
            for server in self._servers.values()
            if server.connected
            for tool in server.tools.values()
        ]

    def is_server_connected(self, server_id: str) -> bool:
        server = self._servers.get(server_id)
        return server is not None and server.connected

    def disconnect(self, server_id: str) -> None:
        server = self._servers.get(server_id)
        if server is not None:
            server.connected = False
            logger.info(f"Server {server_id} disconnected")

    def _lookup(self, server_id: str, tool_name: str):
        server = self._servers.get(server_id)
        if server is None:
            return None, StepResult.fail(f"Server not found: {server_id}")
        if not server.connected:
            return None, StepResult.fail(f"Server is not connected: {server_id}")
        tool = server.get_tool(tool_name)
        if tool is None:
            return None, StepResult.fail(f"Tool not found: {tool_name}")
        return tool, None

    def validate_call(self, server_id: str, tool_name: str, args: Dict[str, Any]) -> bool:
        tool, failure = self._lookup(server_id, tool_name)
        if failure is not None:
            return False
        _, error = validate_arguments(tool.input_schema, args)
        return error is None

    def invoke(self, server_id: str, tool_name: str, args: Dict[str, Any]) -> StepResult:
        tool, failure = self._lookup(server_id, tool_name)
        if failure is not None:
            logger.warning(failure.message)
            return failure

        converted, error = validate_arguments(tool.input_schema, args)
        if error is not None:
            logger.warning(f"{tool.server_id}:{tool.name} rejected arguments: {error}")
            return StepResult.fail(error)

        handler = self._handlers[self._key(server_id, tool_name)]
        return invoke_with_retry(
            lambda: self._call(handler, converted),
            config=self.retry_config,
            label=f"{server_id}:{tool_name}",
        )

    @staticmethod
    def _call(handler: Callable[..., Any], args: Dict[str, Any]) -> StepResult:
        output = handler(**args)
        if isinstance(output, StepResult):
            return output
        return StepResult.ok(output if isinstance(output, str) else str(output))
