"""Template-level components.

Provides:
- Settings loaded from .env
- Structured logging
- A small CLI surface
- State machine discovery and rewriting inside CloudFormation templates
"""
