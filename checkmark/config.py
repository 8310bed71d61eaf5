"""Configuration for test runs."""

from typing import Literal

from pydantic import Field, field_validator

from checkmark.models.base import Model

DEFAULT_MARKER = "@test"


class RunnerConfig(Model):
    """Settings shared by the executor, discovery and the CLI."""

    marker: str = Field(
        default=DEFAULT_MARKER,
        description="Docstring token marking a method as a test",
    )
    warnings_action: Literal["always", "default", "once", "module"] = Field(
        default="always",
        description="Warnings filter action applied while a test runs",
    )

    @field_validator("marker")
    @classmethod
    def _single_token(cls, value: str) -> str:
        if not value or any(char.isspace() for char in value):
            raise ValueError("marker must be a single non-empty token")
        return value
