"""Declarative schemas of the preprocessing directives.

Defines immutable Pydantic models describing inclusion directives,
generic invocations and the reserved spellings used to detect them.
"""

from .directives import GenericInvocation, IncludeDirective, ReservedNames

__all__ = (
    'GenericInvocation',
    'IncludeDirective',
    'ReservedNames',
)
