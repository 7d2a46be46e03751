#!/usr/bin/env python3
"""Programmatic rewrite example.

This demonstrates using the injector components directly:

* load settings from `.env`
* rewrite one `Fn::Sub` definition fragment in memory
* rewrite every state machine of a template file

The template path is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from sfn_context_injector.injector.config import InjectorSettings
from sfn_context_injector.injector.definition import update_definition_string
from sfn_context_injector.injector.logging import configure_logging
from sfn_context_injector.injector.template import (
    inject_context_into_template,
    load_template,
    save_template,
)

_DEMO_DEFINITION = {
    "StartAt": "InvokeLambda",
    "States": {
        "InvokeLambda": {
            "Type": "Task",
            "Resource": "arn:aws:states:::lambda:invoke",
            "Parameters": {"FunctionName": "${FunctionArn}", "Payload.$": "$"},
            "End": True,
        }
    },
}


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inject execution context (programmatic example).")
    parser.add_argument("--template", default=None, help="Optional CloudFormation JSON template")
    parser.add_argument("--output", default=None, help="Where to write the rewritten template")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = InjectorSettings()
    configure_logging(settings.log_level)

    fragment = {"Fn::Sub": [json.dumps(_DEMO_DEFINITION), {"FunctionArn": "arn:aws:lambda:..."}]}
    update_definition_string(fragment, "demo-state-machine")
    print(json.dumps(json.loads(fragment["Fn::Sub"][0]), indent=2))

    if args.template:
        template_path = Path(args.template)
        template = load_template(template_path)
        report = inject_context_into_template(template)
        output = Path(args.output) if args.output else template_path
        save_template(template, output, indent=settings.output_indent)
        print(f"Rewrote {len(report.modified_state_machines)} state machine(s) into {output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
