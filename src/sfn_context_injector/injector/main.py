"""CLI entrypoint for the context injector."""

from __future__ import annotations

import argparse
import copy
import logging
import sys
from pathlib import Path
from typing import TextIO

from pydantic import ValidationError

from sfn_context_injector import __version__
from sfn_context_injector.injector.config import InjectorSettings
from sfn_context_injector.injector.definition import DefinitionParseError
from sfn_context_injector.injector.logging import configure_logging
from sfn_context_injector.injector.template import (
    TemplateLoadError,
    TemplateReport,
    dump_template,
    inject_context_into_template,
    load_template,
    save_template,
)

logger = logging.getLogger(__name__)

STDOUT_PATH = "-"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sfn-context-injector",
        description=(
            "Inject the Step Functions execution context into Lambda and nested "
            "state machine steps of a CloudFormation template"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"stepfunctions-context-injector {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    inject = subparsers.add_parser(
        "inject", help="Rewrite state machine definitions in a JSON template"
    )
    inject.add_argument("--template", required=True, help="Path to the CloudFormation JSON template")
    inject.add_argument(
        "--output",
        default=None,
        help="Where to write the rewritten template ('-' for stdout; defaults to in place)",
    )

    inspect = subparsers.add_parser(
        "inspect",
        help="Show, per Task step, the integration and what injection would do (writes nothing)",
    )
    inspect.add_argument("--template", required=True, help="Path to the CloudFormation JSON template")

    return parser


def _print_report(report: TemplateReport, *, verbose: bool, file: TextIO | None = None) -> None:
    for state_machine in report.state_machines:
        for step in state_machine.steps:
            if not verbose and not step.modified:
                continue
            outcome = step.outcome.value if step.outcome is not None else "skipped"
            print(
                f"{state_machine.name}: {step.step_name} "
                f"[{step.integration.value}] {outcome}",
                file=file,
            )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = InjectorSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        template_path = Path(args.template)
        template = load_template(template_path)

        if args.command == "inspect":
            report = inject_context_into_template(copy.deepcopy(template))
            _print_report(report, verbose=True)
            return 0

        if args.command == "inject":
            if settings.enabled:
                report = inject_context_into_template(template)
                _print_report(
                    report,
                    verbose=False,
                    file=sys.stderr if args.output == STDOUT_PATH else sys.stdout,
                )
                logger.info(
                    "Template rewritten",
                    extra={
                        "template": str(template_path),
                        "state_machines": len(report.state_machines),
                        "modified": len(report.modified_state_machines),
                    },
                )
            else:
                logger.info("Injection disabled; template copied unchanged")

            if args.output == STDOUT_PATH:
                sys.stdout.write(dump_template(template, indent=settings.output_indent))
            else:
                output_path = Path(args.output) if args.output else template_path
                save_template(template, output_path, indent=settings.output_indent)
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (TemplateLoadError, DefinitionParseError) as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
