from __future__ import annotations

from typing import TypeAlias, TypeGuard

JsonValue: TypeAlias = None | bool | int | float | str | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]


def is_json_object(value: object) -> TypeGuard[JsonObject]:
    """Return True for object-shaped values (a parsed JSON mapping)."""

    return isinstance(value, dict)
