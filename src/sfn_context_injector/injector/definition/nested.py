from __future__ import annotations

from enum import Enum

from .json_value import JsonObject, is_json_object
from .payload import JSON_MERGE_EXPRESSION
from .safety import CONTEXT_KEY, INPUT_KEY, is_safe_to_inject


class NestedExecutionOutcome(str, Enum):
    CONTEXT_INJECTED = "context_injected"
    ALREADY_INJECTED = "already_injected"
    UNSAFE_INPUT = "unsafe_input"

    @property
    def modified(self) -> bool:
        return self is NestedExecutionOutcome.CONTEXT_INJECTED


def inject_into_nested_execution_parameters(parameters: JsonObject) -> NestedExecutionOutcome:
    """Add `CONTEXT.$` to a `states:startExecution` step's `Input`, in place.

    Existing `Input` keys are kept. Nothing happens when the safety check
    rejects the current `Input`; a `CONTEXT.$` that already holds the merge
    expression is reported as `ALREADY_INJECTED` rather than `UNSAFE_INPUT`.
    """

    if not is_safe_to_inject(parameters):
        input_value = parameters.get(INPUT_KEY)
        if is_json_object(input_value) and input_value.get(CONTEXT_KEY) == JSON_MERGE_EXPRESSION:
            return NestedExecutionOutcome.ALREADY_INJECTED
        return NestedExecutionOutcome.UNSAFE_INPUT

    input_value = parameters.get(INPUT_KEY)
    if not is_json_object(input_value):
        input_value = {}
        parameters[INPUT_KEY] = input_value

    input_value[CONTEXT_KEY] = JSON_MERGE_EXPRESSION
    return NestedExecutionOutcome.CONTEXT_INJECTED
