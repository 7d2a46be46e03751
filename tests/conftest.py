"""Test configuration and fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

DefinitionFactory = Callable[..., str]


def _definition_with_step(step: dict[str, object], step_name: str = "InvokeLambda") -> str:
    return json.dumps(
        {"Comment": "fake comment", "StartAt": step_name, "States": {step_name: step}},
        separators=(",", ":"),
    )


@pytest.fixture
def state_machine_name() -> str:
    return "fake-state-machine-name"


@pytest.fixture
def definition_with_step() -> DefinitionFactory:
    """Serialise a one-step definition the way templates embed it."""
    return _definition_with_step


@pytest.fixture(autouse=True)
def clean_injector_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of settings-driven tests."""
    for name in ("LOG_LEVEL", "INJECTOR_ENABLED", "INJECTOR_OUTPUT_INDENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def template() -> dict[str, object]:
    """Provide a small template with one state machine of each DefinitionString shape."""
    lambda_step = {
        "Type": "Task",
        "Resource": "arn:aws:states:::lambda:invoke",
        "Parameters": {"FunctionName": "fake-function-name", "Payload.$": "$"},
        "End": True,
    }
    nested_step = {
        "Type": "Task",
        "Resource": "arn:aws:states:::states:startExecution.sync:2",
        "Parameters": {
            "StateMachineArn": "arn:aws:states:us-east-1:123456789012:stateMachine:child",
            "Input": {"foo": "bar"},
        },
        "End": True,
    }
    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Resources": {
            "SubStateMachine": {
                "Type": "AWS::StepFunctions::StateMachine",
                "Properties": {
                    "StateMachineName": "sub-state-machine",
                    "DefinitionString": {"Fn::Sub": [_definition_with_step(lambda_step), {}]},
                },
            },
            "PlainStateMachine": {
                "Type": "AWS::StepFunctions::StateMachine",
                "Properties": {
                    "DefinitionString": _definition_with_step(nested_step, "StartChild"),
                },
            },
            "Bucket": {"Type": "AWS::S3::Bucket", "Properties": {"BucketName": "b"}},
        },
    }


@pytest.fixture
def template_file(tmp_path: Path, template: dict[str, object]) -> Path:
    path = tmp_path / "template.json"
    path.write_text(json.dumps(template, indent=2), encoding="utf-8")
    return path
