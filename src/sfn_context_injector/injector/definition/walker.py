"""Rewrite the state machine definition embedded in a CloudFormation fragment.

`DefinitionString` arrives in one of two shapes:
- a plain JSON string
- `{"Fn::Sub": ["<json>", {<substitutions>}]}`

The definition is parsed, every Task step is dispatched on its `Resource`, and
the result is serialised back into the slot it came from. Fragments that
contain nothing to rewrite are returned exactly as they were given.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from .json_value import JsonObject, JsonValue, is_json_object
from .nested import NestedExecutionOutcome, inject_into_nested_execution_parameters
from .payload import PayloadOutcome, inject_into_lambda_parameters
from .resources import IntegrationKind, classify_resource

logger = logging.getLogger(__name__)

SUBSTITUTION_KEY = "Fn::Sub"

_WARN_OUTCOMES = frozenset(
    {
        PayloadOutcome.PARTIALLY_WIRED,
        PayloadOutcome.NON_OBJECT_PAYLOAD,
        PayloadOutcome.CUSTOM_PAYLOAD_PATH,
        NestedExecutionOutcome.UNSAFE_INPUT,
    }
)


class DefinitionParseError(ValueError):
    """Raised when an embedded definition is not a JSON object."""

    def __init__(self, message: str, *, state_machine_name: str) -> None:
        super().__init__(message)
        self.state_machine_name = state_machine_name


@dataclass(frozen=True, slots=True)
class StepResult:
    step_name: str
    integration: IntegrationKind
    outcome: PayloadOutcome | NestedExecutionOutcome | None = None

    @property
    def modified(self) -> bool:
        return self.outcome is not None and self.outcome.modified


def _log_step_result(log: logging.Logger, result: StepResult, state_machine_name: str) -> None:
    extra = {
        "state_machine": state_machine_name,
        "step": result.step_name,
        "integration": result.integration.value,
        "outcome": result.outcome.value if result.outcome is not None else None,
    }
    if result.modified:
        log.info("Injected execution context into step", extra=extra)
    elif result.outcome in _WARN_OUTCOMES:
        log.warning(
            "Existing step wiring prevents execution context injection; step left unchanged",
            extra=extra,
        )
    else:
        log.debug("Step left unchanged", extra=extra)


def _inject_into_step(step_name: str, step: JsonValue) -> StepResult:
    if not is_json_object(step) or step.get("Type") != "Task":
        return StepResult(step_name=step_name, integration=IntegrationKind.OTHER)

    integration = classify_resource(step.get("Resource"))
    parameters = step.get("Parameters")
    if not is_json_object(parameters):
        return StepResult(step_name=step_name, integration=integration)

    if integration is IntegrationKind.LAMBDA_INVOKE:
        return StepResult(
            step_name=step_name,
            integration=integration,
            outcome=inject_into_lambda_parameters(parameters),
        )
    if integration is IntegrationKind.NESTED_EXECUTION:
        return StepResult(
            step_name=step_name,
            integration=integration,
            outcome=inject_into_nested_execution_parameters(parameters),
        )
    return StepResult(step_name=step_name, integration=integration)


def inject_context_into_definition(
    definition: JsonObject,
    *,
    state_machine_name: str,
    log: logging.Logger | None = None,
) -> list[StepResult]:
    """Rewrite every eligible step of a parsed definition in place."""

    log = log or logger
    states = definition.get("States")
    if not is_json_object(states):
        log.debug("Definition has no States map", extra={"state_machine": state_machine_name})
        return []

    results: list[StepResult] = []
    for step_name, step in states.items():
        result = _inject_into_step(step_name, step)
        _log_step_result(log, result, state_machine_name)
        results.append(result)
    return results


def parse_definition(definition_string: str, *, state_machine_name: str) -> JsonObject:
    try:
        definition = json.loads(definition_string)
    except json.JSONDecodeError as e:
        raise DefinitionParseError(
            f"Invalid state machine definition for {state_machine_name}: {e}",
            state_machine_name=state_machine_name,
        ) from e
    except RecursionError as e:
        raise DefinitionParseError(
            f"State machine definition for {state_machine_name} is nested too deeply",
            state_machine_name=state_machine_name,
        ) from e

    if not is_json_object(definition):
        raise DefinitionParseError(
            f"State machine definition for {state_machine_name} is not a JSON object",
            state_machine_name=state_machine_name,
        )
    return definition


def serialize_definition(definition: JsonObject) -> str:
    return json.dumps(definition, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class DefinitionUpdate:
    """The rewritten fragment plus what happened to each step."""

    fragment: object
    steps: tuple[StepResult, ...] = ()

    @property
    def modified(self) -> bool:
        return any(step.modified for step in self.steps)


def rewrite_definition_fragment(
    definition_string: object,
    state_machine_name: str,
    log: logging.Logger | None = None,
) -> DefinitionUpdate:
    """Rewrite a `DefinitionString` fragment and report per-step results.

    Raises:
        DefinitionParseError: if the embedded string is not a JSON object. The
            fragment is not touched in that case.
    """

    log = log or logger

    if isinstance(definition_string, str):
        definition = parse_definition(definition_string, state_machine_name=state_machine_name)
        steps = inject_context_into_definition(
            definition, state_machine_name=state_machine_name, log=log
        )
        update = DefinitionUpdate(fragment=definition_string, steps=tuple(steps))
        if not update.modified:
            return update
        return DefinitionUpdate(fragment=serialize_definition(definition), steps=update.steps)

    if not is_json_object(definition_string):
        log.debug(
            "Unsupported DefinitionString shape; left unchanged",
            extra={"state_machine": state_machine_name},
        )
        return DefinitionUpdate(fragment=definition_string)

    substitution = definition_string.get(SUBSTITUTION_KEY)
    if isinstance(substitution, str) and substitution:
        # {"Fn::Sub": "<json>"}, as produced by wrap_for_substitution.
        update = rewrite_definition_fragment(substitution, state_machine_name, log)
        if update.modified:
            definition_string[SUBSTITUTION_KEY] = update.fragment
        return DefinitionUpdate(fragment=definition_string, steps=update.steps)

    if not isinstance(substitution, list) or not substitution:
        log.debug(
            "DefinitionString has no Fn::Sub definition; left unchanged",
            extra={"state_machine": state_machine_name},
        )
        return DefinitionUpdate(fragment=definition_string)

    embedded = substitution[0]
    if not isinstance(embedded, str) or not embedded:
        log.debug(
            "Fn::Sub has no embedded definition string; left unchanged",
            extra={"state_machine": state_machine_name},
        )
        return DefinitionUpdate(fragment=definition_string)

    definition = parse_definition(embedded, state_machine_name=state_machine_name)
    steps = inject_context_into_definition(
        definition, state_machine_name=state_machine_name, log=log
    )
    update = DefinitionUpdate(fragment=definition_string, steps=tuple(steps))
    if update.modified:
        substitution[0] = serialize_definition(definition)
    return update


def update_definition_string(
    definition_string: object,
    state_machine_name: str,
    log: logging.Logger | None = None,
) -> object:
    """Inject the execution context into a `DefinitionString` fragment.

    A plain string comes back as a new string when a step was rewritten (see
    :func:`wrap_for_substitution` for storing it back into a template). An
    `Fn::Sub` list is rewritten in place and the same object is returned.
    Anything else is returned unchanged.
    """

    return rewrite_definition_fragment(definition_string, state_machine_name, log).fragment


def wrap_for_substitution(definition_string: str) -> dict[str, str]:
    """Wrap a rewritten definition so CloudFormation resolves it through `Fn::Sub`."""

    return {SUBSTITUTION_KEY: definition_string}
