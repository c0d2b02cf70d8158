"""Pytest configuration for multitool tests."""
import sys
import threading
from pathlib import Path

import pytest

# Add src to path for the tests - conftest is in tests/, so parent.parent is project root
project_root = Path(__file__).resolve().parent.parent
src_path = project_root / "src"

# Insert at the very beginning to override any other paths
sys.path.insert(0, str(src_path))

from multitool.plan.models import StepResult  # noqa: E402


class FakeInvoker:
    """Scripted ToolInvoker that records every call.

    ``responses`` maps ``tool_name`` to a StepResult, a list of StepResults
    (consumed in order, last one repeats) or a callable taking the args.
    Unscripted tools echo their arguments.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self._lock = threading.Lock()

    def invoke(self, server_id, tool_name, args):
        with self._lock:
            self.calls.append((server_id, tool_name, dict(args)))
            response = self.responses.get(tool_name)
            if isinstance(response, list):
                response = response.pop(0) if len(response) > 1 else response[0]
        if callable(response):
            return response(args)
        if response is None:
            return StepResult.ok(f"{tool_name}({', '.join(f'{k}={v}' for k, v in sorted(args.items()))})")
        return response

    @property
    def tool_names(self):
        return [name for _, name, _ in self.calls]

    def args_for(self, tool_name):
        return [args for _, name, args in self.calls if name == tool_name]


class FakePlanner:
    """Planner returning scripted answers and recording prompts."""

    def __init__(self, answers=None, default="continue"):
        self.answers = list(answers or [])
        self.default = default
        self.prompts = []

    def ask(self, prompt):
        self.prompts.append(prompt)
        if self.answers:
            answer = self.answers.pop(0)
            if isinstance(answer, Exception):
                raise answer
            return answer
        return self.default


@pytest.fixture
def fake_invoker():
    return FakeInvoker()


@pytest.fixture
def fake_planner():
    return FakePlanner()
