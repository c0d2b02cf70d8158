#!/usr/bin/env python
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from multitool import __version__

logger = logging.getLogger(__name__)


def _working_dir() -> Path:
    return Path.cwd().resolve()


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("multitool").setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multitool",
        description="multitool - run multi-step tool plans",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    validate_p = subparsers.add_parser("validate", help="Parse and validate a plan file")
    validate_p.add_argument("plan", type=Path, help="Path to plan JSON")

    show_p = subparsers.add_parser("show", help="Print a plan's steps")
    show_p.add_argument("plan", type=Path, help="Path to plan JSON")

    run_p = subparsers.add_parser("run", help="Execute a plan against a tool server")
    run_p.add_argument("plan", type=Path, help="Path to plan JSON")
    run_p.add_argument("--tools-url", help="Tool server base URL (default: MULTITOOL_TOOLS_URL)")
    run_p.add_argument("--max-iterations", type=_positive_int, help="Ceiling for ITERATIVE plans")
    run_p.add_argument("--json", action="store_true", help="Output JSON")

    subparsers.add_parser("version", help="Show version")
    return parser


def _cmd_validate(plan_path: Path, out) -> int:
    from multitool.plan import DependencyAnalyzer, load_plan

    plan = load_plan(plan_path)
    error = DependencyAnalyzer().validate(plan)
    if error is not None:
        out.print_error(f"Invalid plan: {error.reason}")
        return 1
    cycle = DependencyAnalyzer().find_cycle(plan)
    if cycle:
        out.print_error(f"Plan has circular dependencies: {' -> '.join(cycle)}")
        return 1
    out.print_success(f"{plan_path} is a valid {plan.plan_type.value} plan with {len(plan.steps)} steps")
    return 0


def _cmd_show(plan_path: Path, out) -> int:
    from multitool.plan import load_plan

    plan = load_plan(plan_path)
    if plan.is_empty:
        out.print_warning(f"No steps found in {plan_path}")
        return 1
    out.print_plan(plan)
    return 0


def _cmd_run(args, out) -> int:
    from multitool.engine_config import get_engine_config
    from multitool.execution import ExecutionEngine
    from multitool.llm import create_planner
    from multitool.plan import load_plan
    from multitool.tools import HttpToolInvoker, RetryConfig

    config = get_engine_config()
    tools_url = args.tools_url or config.tools_url
    if not tools_url:
        out.print_error("No tool server configured. Pass --tools-url or set MULTITOOL_TOOLS_URL.")
        return 2
    if args.max_iterations is not None:
        config = dataclasses.replace(config, max_iterations=args.max_iterations)

    plan = load_plan(args.plan)

    planner = None
    if config.llm_api_key:
        try:
            planner = create_planner(
                config.llm_provider,
                config.llm_api_key,
                model=config.llm_model,
                api_url=config.llm_api_url,
            )
        except ValueError as e:
            out.print_error(str(e))
            return 2
    else:
        logger.info("No planner API key configured; running without a planner")

    retry_config = RetryConfig(max_attempts=config.tool_max_attempts, backoff_unit=config.tool_backoff_unit)
    invoker = HttpToolInvoker(
        tools_url,
        retry_config=retry_config,
        connect_timeout=config.tool_connect_timeout,
        read_timeout=config.tool_read_timeout,
    )

    try:
        with ExecutionEngine.from_config(invoker, planner=planner, config=config) as engine:
            result = engine.execute(plan)
    finally:
        invoker.close()
        if planner is not None:
            planner.close()

    if args.json:
        print(json.dumps({
            "success": result.success,
            "content": result.content,
            "message": result.message,
        }, indent=2))
    else:
        out.print_result(result)
    return 0 if result.success else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    load_dotenv(_working_dir() / ".env")
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "version":
        print(f"multitool {__version__}")
        return 0

    from multitool.cli.output import ConsoleOutput
    out = ConsoleOutput()

    if args.command == "validate":
        return _cmd_validate(args.plan, out)
    elif args.command == "show":
        return _cmd_show(args.plan, out)
    elif args.command == "run":
        return _cmd_run(args, out)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
