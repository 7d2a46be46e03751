"""Find state machines in a CloudFormation template and rewrite their definitions.

Only `AWS::StepFunctions::StateMachine` resources with a `DefinitionString`
property are rewritten. Inline `Definition` objects and `DefinitionS3Location`
are left alone.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .definition import StepResult, rewrite_definition_fragment, wrap_for_substitution
from .definition.json_value import JsonObject, is_json_object

logger = logging.getLogger(__name__)

STATE_MACHINE_RESOURCE_TYPE = "AWS::StepFunctions::StateMachine"


class TemplateLoadError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class StateMachineResource:
    logical_id: str
    name: str
    resource: JsonObject

    @property
    def properties(self) -> JsonObject:
        properties = self.resource.get("Properties")
        return properties if is_json_object(properties) else {}


@dataclass(frozen=True, slots=True)
class StateMachineReport:
    logical_id: str
    name: str
    steps: tuple[StepResult, ...] = ()

    @property
    def modified(self) -> bool:
        return any(step.modified for step in self.steps)


@dataclass(slots=True)
class TemplateReport:
    state_machines: list[StateMachineReport] = field(default_factory=list)

    @property
    def modified_state_machines(self) -> list[StateMachineReport]:
        return [sm for sm in self.state_machines if sm.modified]

    @property
    def modified(self) -> bool:
        return bool(self.modified_state_machines)


def find_state_machines(template: JsonObject) -> list[StateMachineResource]:
    """Return the template's state machine resources in declaration order."""

    resources = template.get("Resources")
    if not is_json_object(resources):
        return []

    found: list[StateMachineResource] = []
    for logical_id, resource in resources.items():
        if not is_json_object(resource) or resource.get("Type") != STATE_MACHINE_RESOURCE_TYPE:
            continue
        properties = resource.get("Properties")
        name_raw = properties.get("StateMachineName") if is_json_object(properties) else None
        name = name_raw if isinstance(name_raw, str) and name_raw else logical_id
        found.append(StateMachineResource(logical_id=logical_id, name=name, resource=resource))
    return found


def inject_context_into_template(
    template: JsonObject, *, log: logging.Logger | None = None
) -> TemplateReport:
    """Rewrite every state machine `DefinitionString` in `template`, in place.

    A plain-string `DefinitionString` that was rewritten is stored back as
    `{"Fn::Sub": "<json>"}`. Every definition is rewritten on a copy first;
    `template` is only updated once all of them have parsed.

    Raises:
        DefinitionParseError: if any embedded definition is not valid JSON.
            `template` is left untouched.
    """

    log = log or logger
    report = TemplateReport()
    pending: list[tuple[JsonObject, object]] = []

    for state_machine in find_state_machines(template):
        properties = state_machine.properties
        if "DefinitionString" not in properties:
            log.debug(
                "State machine has no DefinitionString; skipped",
                extra={"state_machine": state_machine.name},
            )
            report.state_machines.append(
                StateMachineReport(logical_id=state_machine.logical_id, name=state_machine.name)
            )
            continue

        log.info(
            "Injecting execution context into state machine",
            extra={"state_machine": state_machine.name},
        )
        update = rewrite_definition_fragment(
            copy.deepcopy(properties["DefinitionString"]), state_machine.name, log
        )
        if update.modified:
            fragment = update.fragment
            if isinstance(fragment, str):
                fragment = wrap_for_substitution(fragment)
            pending.append((properties, fragment))

        report.state_machines.append(
            StateMachineReport(
                logical_id=state_machine.logical_id,
                name=state_machine.name,
                steps=update.steps,
            )
        )

    for properties, fragment in pending:
        properties["DefinitionString"] = fragment

    return report


def load_template(path: Path) -> JsonObject:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateLoadError(f"Cannot read template: {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateLoadError(f"Template is not valid JSON: {path}: {e}") from e
    except RecursionError as e:
        raise TemplateLoadError(f"Template is nested too deeply: {path}") from e

    if not is_json_object(raw):
        raise TemplateLoadError(f"Template root must be a JSON object: {path}")
    return raw


def dump_template(template: JsonObject, *, indent: int = 2) -> str:
    return json.dumps(template, indent=indent or None, ensure_ascii=False) + "\n"


def save_template(template: JsonObject, path: Path, *, indent: int = 2) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_template(template, indent=indent), encoding="utf-8")
