"""ToolInvoker boundary and the tool/server descriptors shared by adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from multitool.plan.models import StepResult


@runtime_checkable
class ToolInvoker(Protocol):
    """Protocol every tool adapter implements.

    ``invoke`` never raises for unknown targets, bad arguments or exhausted
    transport retries: those come back as ``StepResult(success=False)``.
    """

    def invoke(self, server_id: str, tool_name: str, args: Dict[str, Any]) -> StepResult:
        ...


@dataclass
class Tool:
    """Descriptor for one callable capability."""
    name: str
    server_id: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict, server_id: Optional[str] = None) -> "Tool":
        return cls(
            name=data.get("name", ""),
            server_id=server_id or data.get("serverId") or data.get("server_id", ""),
            description=data.get("description", ""),
            input_schema=data.get("inputSchema") or data.get("input_schema") or {},
        )

    @property
    def required_parameters(self) -> List[str]:
        return list(self.input_schema.get("required") or [])


@dataclass
class Server:
    """A named group of tools."""
    id: str
    name: str = ""
    connected: bool = True
    tools: Dict[str, Tool] = field(default_factory=dict)

    def add_tool(self, tool: Tool) -> None:
        self.tools[tool.name] = tool

    def get_tool(self, tool_name: str) -> Optional[Tool]:
        return self.tools.get(tool_name)

    @property
    def tool_count(self) -> int:
        return len(self.tools)
