from __future__ import annotations

from .json_value import JsonObject, is_json_object

INPUT_KEY = "Input"
CONTEXT_KEY = "CONTEXT.$"


def is_safe_to_inject(parameters: JsonObject) -> bool:
    """Decide whether `CONTEXT.$` may be added to a nested execution's `Input`.

    - no `Input`: safe, it will be created
    - object `Input` without `CONTEXT.$`: safe, including `{}`
    - object `Input` that already has `CONTEXT.$`: unsafe
    - any non-object `Input` (string, number, list, ...): unsafe
    """

    if INPUT_KEY not in parameters:
        return True

    input_value = parameters[INPUT_KEY]
    if not is_json_object(input_value):
        return False
    return CONTEXT_KEY not in input_value
