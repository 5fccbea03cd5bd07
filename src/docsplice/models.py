"""Base Pydantic models.

This module defines the foundational model classes used by directive
schemas and runtime settings. Both are immutable, so a validated
directive or a resolved configuration cannot change while a document
is being processed.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for directive schemas.

    Design principles enforced by this model:
        - Immutability: validated directives cannot be modified after
          creation.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
