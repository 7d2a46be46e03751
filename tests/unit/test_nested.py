"""Unit tests for nested execution Input injection."""

from __future__ import annotations

import copy

from sfn_context_injector.injector.definition.nested import (
    NestedExecutionOutcome,
    inject_into_nested_execution_parameters,
)

CHILD_ARN = "arn:aws:states:us-east-1:425362996713:stateMachine:agocs-test-noop-state-machine-2"


def test_context_is_merged_into_existing_input() -> None:
    parameters: dict[str, object] = {"StateMachineArn": CHILD_ARN, "Input": {"StatePayload": "hi"}}

    outcome = inject_into_nested_execution_parameters(parameters)

    assert outcome is NestedExecutionOutcome.CONTEXT_INJECTED
    assert parameters["Input"] == {
        "StatePayload": "hi",
        "CONTEXT.$": "States.JsonMerge($$, $, false)",
    }


def test_missing_input_is_created() -> None:
    parameters: dict[str, object] = {"StateMachineArn": CHILD_ARN}

    assert inject_into_nested_execution_parameters(parameters).modified
    assert parameters["Input"] == {"CONTEXT.$": "States.JsonMerge($$, $, false)"}


def test_existing_custom_context_is_not_overwritten() -> None:
    parameters: dict[str, object] = {
        "StateMachineArn": CHILD_ARN,
        "Input": {"StatePayload": "hi", "CONTEXT.$": "something else"},
    }
    before = copy.deepcopy(parameters)

    assert inject_into_nested_execution_parameters(parameters) is NestedExecutionOutcome.UNSAFE_INPUT
    assert parameters == before


def test_non_object_input_is_not_touched() -> None:
    parameters: dict[str, object] = {"StateMachineArn": CHILD_ARN, "Input.$": "$", "Input": "foo"}
    before = copy.deepcopy(parameters)

    assert inject_into_nested_execution_parameters(parameters) is NestedExecutionOutcome.UNSAFE_INPUT
    assert parameters == before


def test_second_injection_reports_already_injected() -> None:
    parameters: dict[str, object] = {"StateMachineArn": CHILD_ARN, "Input": {}}
    inject_into_nested_execution_parameters(parameters)
    once = copy.deepcopy(parameters)

    outcome = inject_into_nested_execution_parameters(parameters)

    assert outcome is NestedExecutionOutcome.ALREADY_INJECTED
    assert not outcome.modified
    assert parameters == once
