"""Tests for DependencyAnalyzer."""

import pytest

from multitool.errors import CycleDetectedError, PlanInvalidError
from multitool.plan.analyzer import DependencyAnalyzer
from multitool.plan.models import Plan, PlanType, Step


def _step(step_id, *deps):
    return Step(step_id, "server", "tool", dependencies=deps)


class TestValidate:
    """Tests for structural validation."""

    def setup_method(self):
        self.analyzer = DependencyAnalyzer()

    def test_valid_plan(self):
        plan = Plan(steps=[_step("a"), _step("b", "a")])

        assert self.analyzer.validate(plan) is None

    def test_empty_plan_is_invalid(self):
        error = self.analyzer.validate(Plan())

        assert isinstance(error, PlanInvalidError)
        assert error.reason == "plan has no steps"

    def test_self_dependency(self):
        error = self.analyzer.validate(Plan(steps=[_step("a", "a")]))

        assert "depends on itself" in error.reason
        assert error.step_id == "a"

    def test_missing_fields(self):
        plan = Plan(steps=[_step("a"), Step("b", "", "tool")])

        error = self.analyzer.validate(plan)

        assert error.reason == "step 2 is missing an id, server id or tool name"
        assert error.step_id == "b"

    def test_duplicate_ids(self):
        error = self.analyzer.validate(Plan(steps=[_step("a"), _step("a")]))

        assert error.reason == "duplicate step id 'a'"

    @pytest.mark.parametrize("plan_type", [PlanType.ITERATIVE, PlanType.CONDITIONAL])
    def test_condition_required(self, plan_type):
        """Test ITERATIVE and CONDITIONAL plans need a condition prompt."""
        error = self.analyzer.validate(Plan(plan_type, [_step("a")], condition_prompt="  "))

        assert error.reason == f"{plan_type.value} plans require a condition prompt"

    def test_unknown_dependency_is_not_structural(self):
        """Test a dependency on a missing step passes validation."""
        assert self.analyzer.validate(Plan(steps=[_step("a", "ghost")])) is None


class TestCycles:
    """Tests for cycle detection."""

    def setup_method(self):
        self.analyzer = DependencyAnalyzer()

    def test_no_cycle(self):
        plan = Plan(steps=[_step("a"), _step("b", "a"), _step("c", "b")])

        assert not self.analyzer.detect_cycle(plan)

    def test_diamond_is_not_a_cycle(self):
        plan = Plan(steps=[_step("a"), _step("b", "a"), _step("c", "a"), _step("d", "b", "c")])

        assert not self.analyzer.detect_cycle(plan)

    def test_two_step_cycle(self):
        plan = Plan(steps=[_step("a", "b"), _step("b", "a")])

        assert self.analyzer.detect_cycle(plan)
        assert self.analyzer.find_cycle(plan) == ["a", "b", "a"]

    def test_transitive_cycle(self):
        """Test a step reaching itself through two others."""
        plan = Plan(steps=[_step("a", "c"), _step("b", "a"), _step("c", "b")])

        cycle = self.analyzer.find_cycle(plan)

        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b", "c"}

    def test_unknown_dependency_is_skipped(self):
        plan = Plan(steps=[_step("a", "ghost")])

        assert not self.analyzer.detect_cycle(plan)


class TestCheck:
    """Tests for check()."""

    def test_raises_invalid(self):
        with pytest.raises(PlanInvalidError):
            DependencyAnalyzer().check(Plan())

    def test_raises_cycle(self):
        plan = Plan(steps=[_step("a", "b"), _step("b", "a")])

        with pytest.raises(CycleDetectedError, match="a -> b -> a"):
            DependencyAnalyzer().check(plan)

    def test_valid_plan_passes(self):
        DependencyAnalyzer().check(Plan(steps=[_step("a")]))


class TestLargePlans:
    """Cycle detection on large plans."""

    def setup_method(self):
        self.analyzer = DependencyAnalyzer()

    def test_dense_dag(self):
        """Test a 40-step plan where every step depends on all earlier ones."""
        steps = [_step(f"s{i}", *[f"s{j}" for j in range(i)]) for i in range(40)]

        assert self.analyzer.find_cycle(Plan(steps=steps)) is None

    def test_dense_dag_declared_in_reverse(self):
        steps = [_step(f"s{i}", *[f"s{j}" for j in range(i)]) for i in reversed(range(40))]

        assert not self.analyzer.detect_cycle(Plan(steps=steps))

    def test_long_chain(self):
        steps = [_step("s0")] + [_step(f"s{i}", f"s{i - 1}") for i in range(1, 2000)]

        assert not self.analyzer.detect_cycle(Plan(steps=steps))

    def test_long_chain_closed_into_cycle(self):
        steps = [_step("s0", "s1999")] + [_step(f"s{i}", f"s{i - 1}") for i in range(1, 2000)]

        cycle = self.analyzer.find_cycle(Plan(steps=steps))

        assert cycle[0] == cycle[-1] == "s0"
        assert len(cycle) == 2001
