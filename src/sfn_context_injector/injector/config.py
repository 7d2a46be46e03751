"""Configuration for the context injector.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InjectorSettings(BaseSettings):
    """Settings for the context injector.

    Environment variables:
    - LOG_LEVEL               (optional)
    - INJECTOR_ENABLED        (optional)
    - INJECTOR_OUTPUT_INDENT  (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `InjectorSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    enabled: bool = Field(
        default=True,
        validation_alias="INJECTOR_ENABLED",
        description=(
            "If false, templates are written back without injecting the execution context. "
            "Useful to switch the rewrite off per stage without changing the build."
        ),
    )

    output_indent: int = Field(
        default=2,
        ge=0,
        validation_alias="INJECTOR_OUTPUT_INDENT",
        description="Indentation used when writing the rewritten template",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )
