"""Tests for the in-process ToolRegistry."""

import pytest

from multitool.errors import ToolInvocationFault
from multitool.plan.models import StepResult
from multitool.tools.invoker import ToolInvoker
from multitool.tools.registry import ToolRegistry
from multitool.tools.retry import RetryConfig

FORECAST_SCHEMA = {
    "properties": {"city": {"type": "string"}, "days": {"type": "integer"}},
    "required": ["city"],
}


@pytest.fixture
def registry():
    reg = ToolRegistry(retry_config=RetryConfig(backoff_unit=0))

    @reg.tool("weather", description="Daily forecast", input_schema=FORECAST_SCHEMA)
    def forecast(city, days=1):
        return f"{city}: sunny for {days} day(s)"

    reg.register_tool("math", "add", lambda a, b: a + b)
    return reg


class TestRegistration:
    """Tests for server and tool registration."""

    def test_implements_protocol(self, registry):
        assert isinstance(registry, ToolInvoker)

    def test_decorator_registers(self, registry):
        tool = registry.get_tool("weather", "forecast")

        assert tool.description == "Daily forecast"
        assert tool.required_parameters == ["city"]

    def test_list_tools_only_connected(self, registry):
        registry.disconnect("math")

        names = [t.name for t in registry.list_tools()]

        assert names == ["forecast"]
        assert not registry.is_server_connected("math")
        assert registry.is_server_connected("weather")

    def test_validate_call(self, registry):
        assert registry.validate_call("weather", "forecast", {"city": "Lisbon"})
        assert not registry.validate_call("weather", "forecast", {})
        assert not registry.validate_call("weather", "missing", {"city": "Lisbon"})


class TestInvoke:
    """Tests for invoke()."""

    def test_success_with_conversion(self, registry):
        result = registry.invoke("weather", "forecast", {"city": "Lisbon", "days": "2"})

        assert result == StepResult.ok("Lisbon: sunny for 2 day(s)")

    def test_non_string_output_stringified(self, registry):
        assert registry.invoke("math", "add", {"a": 2, "b": 3}).content == "5"

    def test_unknown_server(self, registry):
        assert registry.invoke("nope", "forecast", {}).message == "Server not found: nope"

    def test_disconnected_server(self, registry):
        registry.disconnect("weather")

        result = registry.invoke("weather", "forecast", {"city": "Lisbon"})

        assert result.message == "Server is not connected: weather"

    def test_unknown_tool(self, registry):
        assert registry.invoke("weather", "radar", {}).message == "Tool not found: radar"

    def test_missing_parameter(self, registry):
        result = registry.invoke("weather", "forecast", {"days": 2})

        assert result.message == "Missing required parameter: city"

    def test_step_result_passthrough(self, registry):
        registry.register_tool("files", "read", lambda path: StepResult.fail(f"No such file: {path}"))

        assert registry.invoke("files", "read", {"path": "x"}).message == "No such file: x"

    def test_transport_fault_retried_once(self, registry):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise ToolInvocationFault("reset")
            return "ok"

        registry.register_tool("net", "ping", flaky)

        assert registry.invoke("net", "ping", {}) == StepResult.ok("ok")
        assert len(calls) == 2

    def test_persistent_fault_fails(self, registry):
        def down():
            raise ConnectionError("refused")

        registry.register_tool("net", "ping", down)

        result = registry.invoke("net", "ping", {})

        assert result.message == "Failed after 2 attempts: refused"

    def test_missing_file_not_retried(self, registry):
        calls = []

        def read(path):
            calls.append(path)
            raise FileNotFoundError(path)

        registry.register_tool("files", "read", read)

        result = registry.invoke("files", "read", {"path": "missing.txt"})

        assert result.message == "Tool execution error: missing.txt"
        assert isinstance(result.error, FileNotFoundError)
        assert calls == ["missing.txt"]
