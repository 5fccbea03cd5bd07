"""Runtime settings for the preprocessor.

Settings are resolved from `DOCSPLICE_*` environment variables and may be
overridden by command-line options. The reserved directive spellings are
configurable as well, for documents that already use `$include` or
`$generic` for other purposes.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docsplice import names
from docsplice.models import SettingsModel
from docsplice.schema import ReservedNames

#: Output path used when neither an option nor the environment provides one.
DEFAULT_OUTPUT = Path('./aidmat_api_doc.yaml')


class Settings(SettingsModel):
    """Preprocessor settings."""

    model_config = SettingsConfigDict(
        env_prefix='DOCSPLICE_',
    )

    output: Path = Field(
        default=DEFAULT_OUTPUT,
        description='Path of the serialized output document.',
    )

    verbose: bool = Field(
        default=False,
        description='Print informational progress events.',
    )

    strict: bool = Field(
        default=False,
        description=(
            'Treat shadowed template definitions and includes '
            'matching no files as errors instead of warnings.'
        ),
    )

    encoding: str = Field(
        default='utf-8',
        description='Text encoding of input and output documents.',
    )

    indent: int = Field(
        default=2,
        ge=2,
        le=9,
        description='Indentation width of the serialized output.',
    )

    include_key: str = Field(default=names.INCLUDE_KEY, min_length=1)
    generic_key: str = Field(default=names.GENERIC_KEY, min_length=1)
    target_key: str = Field(default=names.TARGET_KEY, min_length=1)
    generic_suffix: str = Field(default=names.GENERIC_SUFFIX, min_length=1)

    @property
    def reserved_names(self) -> ReservedNames:
        """Reserved directive spellings configured for this run."""
        return ReservedNames(
            include_key=self.include_key,
            generic_key=self.generic_key,
            target_key=self.target_key,
            generic_suffix=self.generic_suffix,
        )
