"""Tests for HttpToolInvoker."""

import json

import httpx
import pytest

from multitool.plan.models import StepResult
from multitool.tools.http_invoker import HttpToolInvoker, extract_text_content
from multitool.tools.invoker import Tool
from multitool.tools.retry import RetryConfig

BASE_URL = "http://tools.test"


def _invoker(handler, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpToolInvoker(BASE_URL, retry_config=RetryConfig(backoff_unit=0), client=client, **kwargs)


def _text_response(text, is_error=False):
    return httpx.Response(200, json={"content": [{"type": "text", "text": text}], "isError": is_error})


class TestExtractTextContent:
    """Tests for extract_text_content."""

    def test_first_non_blank_text(self):
        content = [{"type": "image", "data": "..."}, {"type": "text", "text": "  "}, {"type": "text", "text": "hi"}]

        assert extract_text_content(content) == "hi"

    def test_empty(self):
        assert extract_text_content([]) == "No content returned"
        assert extract_text_content(None) == "No content returned"

    def test_no_text(self):
        assert extract_text_content([{"type": "image", "data": "..."}]) == "No text content found"


class TestInvoke:
    """Tests for invoke()."""

    def test_posts_arguments(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return _text_response("sunny")

        result = _invoker(handler).invoke("weather", "forecast", {"city": "Lisbon"})

        assert result == StepResult.ok("sunny")
        assert seen["url"] == f"{BASE_URL}/servers/weather/tools/forecast"
        assert seen["body"] == {"arguments": {"city": "Lisbon"}}

    def test_is_error_is_logical_failure(self):
        calls = []

        def handler(request):
            calls.append(request)
            return _text_response("city unknown", is_error=True)

        result = _invoker(handler).invoke("weather", "forecast", {"city": "Atlantis"})

        assert result.message == "Tool execution failed: city unknown"
        assert len(calls) == 1

    def test_not_found(self):
        result = _invoker(lambda request: httpx.Response(404)).invoke("weather", "radar", {})

        assert result.message == "Tool not found: weather:radar"

    def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, text="bad arguments")

        result = _invoker(handler).invoke("weather", "forecast", {})

        assert result.message == "Tool server error 400: bad arguments"
        assert len(calls) == 1

    def test_server_error_retried(self):
        """Test a 503 followed by a success recovers."""
        responses = [httpx.Response(503, text="busy"), _text_response("sunny")]

        result = _invoker(lambda request: responses.pop(0)).invoke("weather", "forecast", {})

        assert result == StepResult.ok("sunny")

    def test_persistent_server_error_fails(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502, text="bad gateway")

        result = _invoker(handler).invoke("weather", "forecast", {})

        assert not result.success
        assert result.message.startswith("Failed after 2 attempts: Tool server transient 502")
        assert len(calls) == 2

    def test_connection_error_retried(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = _invoker(handler).invoke("weather", "forecast", {})

        assert result.message == "Failed after 2 attempts: refused"
        assert isinstance(result.error, httpx.ConnectError)

    def test_catalogue_validation(self):
        """Test arguments are checked locally against a supplied catalogue."""
        calls = []

        def handler(request):
            calls.append(request)
            return _text_response("ok")

        tools = [Tool("forecast", "weather", input_schema={"required": ["city"]})]
        invoker = _invoker(handler, tools=tools)

        assert invoker.invoke("weather", "forecast", {}).message == "Missing required parameter: city"
        assert invoker.invoke("weather", "radar", {}).message == "Tool not found: radar"
        assert calls == []
        assert invoker.list_tools() == tools

    @pytest.mark.parametrize("server_id,tool_name", [("", "forecast"), ("weather", "")])
    def test_blank_target(self, server_id, tool_name):
        result = _invoker(lambda request: _text_response("x")).invoke(server_id, tool_name, {})

        assert result.message == "Server id and tool name are required"

    def test_close_keeps_injected_client(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: _text_response("x")))
        with HttpToolInvoker(BASE_URL, client=client):
            pass

        assert not client.is_closed
        client.close()
