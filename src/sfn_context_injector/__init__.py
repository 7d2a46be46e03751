"""Step Functions context injector.

Rewrites the state machine definitions embedded in a CloudFormation template so
that Lambda invoke steps and nested execution steps receive the execution
context (`$$.Execution`, `$$.State`, `$$.StateMachine`) with their input:
- configuration loaded from `.env`
- structured logging
- idempotent, merge-only rewrites that never override author wiring
"""

__version__ = "0.1.0"

from sfn_context_injector.injector.config import InjectorSettings
from sfn_context_injector.injector.definition import update_definition_string

__all__ = ["__version__", "InjectorSettings", "update_definition_string"]
