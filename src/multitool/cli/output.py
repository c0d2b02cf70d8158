#!/usr/bin/env python
"""
Output formatting with Rich console.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from multitool.plan.models import Plan, StepResult


custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "success": "green",
})


class ConsoleOutput:
    """Console output with Rich formatting."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(theme=custom_theme)

    def print(self, text: str = "", **kwargs):
        """Print text to console."""
        self.console.print(text, **kwargs)

    def print_error(self, text: str):
        self.console.print(f"[red]Error:[/red] {text}")

    def print_success(self, text: str):
        self.console.print(f"[green]Success:[/green] {text}")

    def print_warning(self, text: str):
        self.console.print(f"[yellow]Warning:[/yellow] {text}")

    def print_info(self, text: str):
        self.console.print(f"[cyan]Info:[/cyan] {text}")

    def print_plan(self, plan: Plan):
        """Render a plan's steps as a table."""
        table = Table(title=f"{plan.plan_type.value} plan ({len(plan.steps)} steps)")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Step", style="bold")
        table.add_column("Capability", style="info")
        table.add_column("Depends on")
        table.add_column("Parameters")

        for i, step in enumerate(plan.steps, start=1):
            params = ", ".join(f"{k}={v!r}" for k, v in step.parameters.items())
            table.add_row(str(i), step.id, step.capability, ", ".join(step.dependencies) or "-", params or "-")

        self.console.print(table)
        if plan.condition_prompt:
            self.console.print(f"[dim]Condition:[/dim] {escape(plan.condition_prompt)}")
        if plan.aggregation_prompt:
            self.console.print(f"[dim]Aggregation:[/dim] {escape(plan.aggregation_prompt)}")

    def print_result(self, result: StepResult):
        if result.success:
            self.print_success(result.message or "Plan completed")
            if result.content:
                self.console.print(result.content, markup=False, highlight=False)
        else:
            self.print_error(escape(result.message))
