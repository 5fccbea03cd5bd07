"""Directive schemas.

Defines immutable Pydantic models describing the shape of the
preprocessing directives found inside documents: inclusion directives
and generic invocations, together with the reserved spellings used to
recognize them.

This module is declarative. Tree traversal and error reporting are
implemented by the resolvers in `docsplice.core`.
"""

from typing import TYPE_CHECKING, Any, Self

from pydantic import Field, StrictStr

from docsplice import names
from docsplice.models import SchemaModel
from docsplice.names import GlobPattern, TemplateName  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Mapping


class ReservedNames(SchemaModel):
    """Reserved spellings of directive keys."""

    include_key: StrictStr = Field(
        default=names.INCLUDE_KEY,
        title='Inclusion key',
        description='Key marking a mapping as an inclusion directive.',
    )

    generic_key: StrictStr = Field(
        default=names.GENERIC_KEY,
        title='Invocation key',
        description='Key marking a mapping as a generic invocation.',
    )

    target_key: StrictStr = Field(
        default=names.TARGET_KEY,
        title='Target key',
        description='Key naming the template inside a generic invocation.',
    )

    generic_suffix: StrictStr = Field(
        default=names.GENERIC_SUFFIX,
        title='Definition suffix',
        description='Suffix marking a mapping key as a generic definition.',
    )

    def is_definition(self, key: Any) -> bool:  # noqa: ANN401
        """Check whether a mapping key declares a generic definition."""
        return isinstance(key, str) and key.endswith(self.generic_suffix)

    def template_name(self, key: str) -> str:
        """Strip the definition suffix from a key.

        Exactly the suffix length is removed, so `Page<GENERIC>` yields
        `Page` and a bare `<GENERIC>` key yields an empty name.
        """
        return key[:len(key) - len(self.generic_suffix)]


class IncludeDirective(SchemaModel):
    """Inclusion directive.

    A mapping holding the inclusion key is wholly replaced by the merged
    contents of every document matched by the pattern.
    """

    pattern: GlobPattern


class GenericInvocation(SchemaModel):
    """Generic invocation.

    A mapping holding the invocation key is wholly replaced by a copy of
    the target template with its placeholders substituted by bindings.
    """

    target: TemplateName

    bindings: dict[Any, Any] = Field(
        default_factory=dict,
        title='Bindings',
        description=(
            'Placeholder names mapped to the values substituted into '
            'the template body.'
        ),
    )

    @classmethod
    def from_payload(cls, payload: 'Mapping[Any, Any]', target_key: str) -> Self:
        """Validate an invocation payload.

        Every payload entry except the target becomes a binding.

        Args:
            payload: Mapping found under the invocation key.
            target_key: Reserved key naming the template.

        Returns:
            Validated invocation.

        Raises:
            pydantic.ValidationError: If the target is absent or is not a string.
        """
        data: dict[str, Any] = {
            'bindings': {
                key: value
                for key, value in payload.items()
                if key != target_key
            },
        }
        if target_key in payload:
            data['target'] = payload[target_key]

        return cls.model_validate(data)
