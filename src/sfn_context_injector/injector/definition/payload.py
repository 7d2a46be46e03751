"""Inject the execution context into Lambda invoke `Parameters`.

A `lambda:invoke` Task carries its payload under exactly one of two keys:
`Payload` (a literal value) or `Payload.$` (a path/intrinsic expression).
Which case applies is decided once by :func:`read_payload_field`; the rewrite
then follows these cases, in priority order:

1.   no payload key: set `Payload.$` to the context projection
2.1  object `Payload` with `Execution.$`, `State.$` and `StateMachine.$`: unchanged
2.2  object `Payload` with some, not all, context fields: unchanged
2.3  object `Payload` with no context fields: add the three `.$` fields
3.   non-object `Payload`: unchanged
4.1  `Payload.$` is `$`: replace with the JsonMerge expression
4.2  `Payload.$` already the JsonMerge expression or the projection: unchanged
4.3  any other `Payload.$`: unchanged
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .json_value import JsonObject, JsonValue, is_json_object

PAYLOAD_KEY = "Payload"
PAYLOAD_PATH_KEY = "Payload.$"

JSON_MERGE_EXPRESSION = "States.JsonMerge($$, $, false)"
CONTEXT_PROJECTION = "$$['Execution', 'State', 'StateMachine']"

CONTEXT_FIELDS: tuple[str, ...] = ("Execution", "State", "StateMachine")


class PayloadFieldKind(str, Enum):
    ABSENT = "absent"
    LITERAL = "literal"
    PATH = "path"


@dataclass(frozen=True, slots=True)
class PayloadField:
    """Which payload key a step uses, and its value."""

    kind: PayloadFieldKind
    value: JsonValue = None


def read_payload_field(parameters: JsonObject) -> PayloadField:
    if PAYLOAD_KEY in parameters:
        return PayloadField(kind=PayloadFieldKind.LITERAL, value=parameters[PAYLOAD_KEY])
    if PAYLOAD_PATH_KEY in parameters:
        return PayloadField(kind=PayloadFieldKind.PATH, value=parameters[PAYLOAD_PATH_KEY])
    return PayloadField(kind=PayloadFieldKind.ABSENT)


class PayloadOutcome(str, Enum):
    CONTEXT_PROJECTION_ADDED = "context_projection_added"
    ALREADY_WIRED = "already_wired"
    PARTIALLY_WIRED = "partially_wired"
    CONTEXT_FIELDS_MERGED = "context_fields_merged"
    NON_OBJECT_PAYLOAD = "non_object_payload"
    JSON_MERGE_APPLIED = "json_merge_applied"
    ALREADY_INJECTED = "already_injected"
    CUSTOM_PAYLOAD_PATH = "custom_payload_path"

    @property
    def modified(self) -> bool:
        return self in _MODIFYING_OUTCOMES


_MODIFYING_OUTCOMES = frozenset(
    {
        PayloadOutcome.CONTEXT_PROJECTION_ADDED,
        PayloadOutcome.CONTEXT_FIELDS_MERGED,
        PayloadOutcome.JSON_MERGE_APPLIED,
    }
)


def _inject_into_object_payload(payload: JsonObject) -> PayloadOutcome:
    path_fields = [f for f in CONTEXT_FIELDS if f"{f}.$" in payload]
    if len(path_fields) == len(CONTEXT_FIELDS):
        return PayloadOutcome.ALREADY_WIRED

    present = [f for f in CONTEXT_FIELDS if f in payload or f"{f}.$" in payload]
    if present:
        return PayloadOutcome.PARTIALLY_WIRED

    for field in CONTEXT_FIELDS:
        payload[f"{field}.$"] = f"$$.{field}"
    return PayloadOutcome.CONTEXT_FIELDS_MERGED


def inject_into_lambda_parameters(parameters: JsonObject) -> PayloadOutcome:
    """Rewrite a `lambda:invoke` step's `Parameters` in place.

    Returns the case that applied; see the module docstring.
    """

    field = read_payload_field(parameters)

    if field.kind is PayloadFieldKind.ABSENT:
        parameters[PAYLOAD_PATH_KEY] = CONTEXT_PROJECTION
        return PayloadOutcome.CONTEXT_PROJECTION_ADDED

    if field.kind is PayloadFieldKind.LITERAL:
        if is_json_object(field.value):
            return _inject_into_object_payload(field.value)
        return PayloadOutcome.NON_OBJECT_PAYLOAD

    # Payload.$: an empty object or any other expression is the author's choice.
    if field.value == "$":
        parameters[PAYLOAD_PATH_KEY] = JSON_MERGE_EXPRESSION
        return PayloadOutcome.JSON_MERGE_APPLIED
    if field.value in (JSON_MERGE_EXPRESSION, CONTEXT_PROJECTION):
        return PayloadOutcome.ALREADY_INJECTED
    return PayloadOutcome.CUSTOM_PAYLOAD_PATH
