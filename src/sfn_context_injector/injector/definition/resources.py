"""Classify Task steps by the integration their `Resource` points at.

Only two integrations are ever rewritten:
- the optimised Lambda integration (`arn:aws:states:::lambda:invoke`)
- nested Step Functions executions (`arn:aws:states:::states:startExecution`,
  optionally `.sync` or `.sync:2`)

Raw function ARNs (the legacy Lambda integration) are recognised so they can
be reported, but they are never touched.
"""

from __future__ import annotations

import re
from enum import Enum

LAMBDA_INVOKE_RESOURCE = "arn:aws:states:::lambda:invoke"
START_EXECUTION_RESOURCE = "arn:aws:states:::states:startExecution"

_NESTED_EXECUTION_PATTERN = re.compile(
    r"^" + re.escape(START_EXECUTION_RESOURCE) + r"(\.sync(:2)?)?$"
)
_LEGACY_LAMBDA_PATTERN = re.compile(r"^arn:aws[a-zA-Z-]*:lambda:[^:]*:[^:]*:function:.+$")


class IntegrationKind(str, Enum):
    LAMBDA_INVOKE = "lambda_invoke"
    LEGACY_LAMBDA = "legacy_lambda"
    NESTED_EXECUTION = "nested_execution"
    OTHER = "other"


def is_lambda_invoke_step(resource: str | None) -> bool:
    return resource == LAMBDA_INVOKE_RESOURCE


def is_nested_execution_step(resource: str | None) -> bool:
    if not isinstance(resource, str):
        return False
    return _NESTED_EXECUTION_PATTERN.match(resource) is not None


def is_legacy_lambda_step(resource: str | None) -> bool:
    if not isinstance(resource, str):
        return False
    return _LEGACY_LAMBDA_PATTERN.match(resource) is not None


def classify_resource(resource: object) -> IntegrationKind:
    """Map a step's `Resource` value onto an :class:`IntegrationKind`.

    Anything that is not a string, or not a recognised ARN, is `OTHER`.
    """

    if not isinstance(resource, str):
        return IntegrationKind.OTHER
    if is_lambda_invoke_step(resource):
        return IntegrationKind.LAMBDA_INVOKE
    if is_nested_execution_step(resource):
        return IntegrationKind.NESTED_EXECUTION
    if is_legacy_lambda_step(resource):
        return IntegrationKind.LEGACY_LAMBDA
    return IntegrationKind.OTHER
