"""Execution context injection for Amazon States Language definitions.

This package holds the pure rewrite logic:
- classification of Task steps by `Resource`
- the safety check for nested execution `Input`
- the Lambda payload and nested execution rewriters
- the walker that parses and re-serialises an embedded definition

Nothing here performs I/O; the template and CLI layers sit on top.
"""

from .walker import (
    DefinitionParseError,
    DefinitionUpdate,
    StepResult,
    rewrite_definition_fragment,
    update_definition_string,
    wrap_for_substitution,
)

__all__ = [
    "DefinitionParseError",
    "DefinitionUpdate",
    "StepResult",
    "rewrite_definition_fragment",
    "update_definition_string",
    "wrap_for_substitution",
]
