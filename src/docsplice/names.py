"""Reserved names and name types of the preprocessing directives.

This module defines the reserved keys recognized inside YAML documents
and strongly-typed aliases used to validate directive contents.

The reserved spellings form part of the public document contract and are
relied upon by documentation authors, the resolvers, and the CLI settings.
"""

from typing import Annotated

from pydantic import Field, StrictStr

#: Reserved key marking a mapping as an inclusion directive.
INCLUDE_KEY = '$include'

#: Reserved key marking a mapping as a generic invocation.
GENERIC_KEY = '$generic'

#: Reserved key naming the template inside a generic invocation.
TARGET_KEY = 'target'

#: Reserved suffix marking a mapping key as a generic definition.
GENERIC_SUFFIX = '<GENERIC>'


GlobPattern = Annotated[
    StrictStr, Field(
        min_length=1,
        title='Inclusion pattern',
        description=(
            'Glob pattern selecting the documents to include. '
            'Relative patterns are resolved against the directory '
            'of the including document; absolute patterns are used '
            'verbatim. Recursive `**` segments are supported.'
        ),
        examples=[
            'paths/*.yaml',
            'schemas/**/*.yml',
        ],
    ),
]

TemplateName = Annotated[
    StrictStr, Field(
        title='Template name',
        description=(
            'Name of a generic template, as declared by a mapping key '
            'with the generic suffix stripped '
            '(for example, `Paged` for `Paged<GENERIC>`).'
        ),
        examples=[
            'Paged',
            'ErrorResponse',
        ],
    ),
]
