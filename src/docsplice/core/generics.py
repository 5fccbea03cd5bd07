"""Generic template extraction and instantiation.

A generic definition is a mapping entry whose key ends with the generic
suffix: `Paged<GENERIC>: {...}` declares the template `Paged`. Definitions
are collected from anywhere in the document into one flat table and are
stripped from the output.

A generic invocation is a mapping holding the invocation key:

    $generic:
      target: Paged
      T: {type: string}

It is replaced by a copy of the template body in which every mapping
entry value equal to a binding name (`T` above) is replaced by the bound
value. Keys, sequence items and unbound strings are left untouched.

Template bodies may invoke other templates; those invocations are
instantiated after substitution, and a template invoking itself is
reported as an error.
"""

from copy import deepcopy
from typing import TYPE_CHECKING

from pydantic import ValidationError

from docsplice.diagnostics import Event, NullDiagnostics
from docsplice.errors import (
    CircularTemplateError,
    DuplicateTemplateError,
    MalformedDirectiveError,
    TemplateShadowWarning,
    UnknownTemplateError,
)
from docsplice.schema import GenericInvocation, ReservedNames
from docsplice.values import is_mapping, is_sequence

from .issues import IssuesMixin

if TYPE_CHECKING:
    from collections.abc import Mapping

    from docsplice.diagnostics import Diagnostics
    from docsplice.values import Value

#: Template name to unresolved template body.
type Templates = dict[str, 'Value']


class GenericResolver(IssuesMixin):
    """Extractor and instantiator of generic templates."""

    def __init__(self, names: ReservedNames | None = None, *,
                 diagnostics: 'Diagnostics | None' = None,
                 strict: bool = False) -> None:
        """Initialize the resolver.

        Args:
            names: Reserved directive spellings, defaults are used if omitted.
            diagnostics: Sink receiving one event per discovered template.
            strict: Whether to raise on duplicate template names instead
                of emitting a warning.
        """
        self.names = names or ReservedNames()
        self.diagnostics = diagnostics or NullDiagnostics()
        self.strict_mode = strict

    def apply(self, tree: 'Value') -> 'Value':
        """Extract the templates of a tree and instantiate them in it."""
        templates = self.extract(tree)

        self.diagnostics.emit(Event(
            stage='extract',
            message=f'Found {len(templates)} generic definitions',
        ))

        return self.instantiate(tree, templates)

    def extract(self, tree: 'Value') -> Templates:
        """Collect generic definitions from a document tree.

        Definition bodies are stored as-is and are not searched for
        nested definitions. The tree itself is left unchanged.

        Args:
            tree: Document tree to scan.

        Returns:
            Mapping from template name to template body.

        Raises:
            DuplicateTemplateError: If a name is declared twice on strict mode.
        """
        templates: Templates = {}
        self._extract_into(templates, tree)

        return templates

    def _extract_into(self, templates: Templates, tree: 'Value') -> None:
        if is_sequence(tree):
            for item in tree:
                self._extract_into(templates, item)

        elif is_mapping(tree):
            for key, item in tree.items():
                if self.names.is_definition(key):
                    self.register(templates, self.names.template_name(key), item)
                else:
                    self._extract_into(templates, item)

    def register(self, templates: Templates, name: str, body: 'Value') -> None:
        """Register a template, the latest definition of a name wins.

        Redefining a name with an equal body, as a document included
        from several places does, is not an issue.

        Raises:
            DuplicateTemplateError: If the name is taken on strict mode.
        """
        shadowing = name in templates and templates[name] != body
        if shadowing and (error := self.emit_issue(
            DuplicateTemplateError(name),
            TemplateShadowWarning,
        )):
            raise error

        self.diagnostics.emit(Event(stage='extract', message=f'Generic {name!r}'))
        templates[name] = body

    def instantiate(self, tree: 'Value', templates: Templates) -> 'Value':
        """Expand every generic invocation of a document tree.

        Definition entries are dropped from every mapping of the result.

        Args:
            tree: Document tree to rewrite.
            templates: Templates collected by `extract`.

        Returns:
            A new document tree free of invocations and definitions.

        Raises:
            UnknownTemplateError: If an invocation targets an unknown template.
            MalformedDirectiveError: If an invocation has an invalid shape.
            CircularTemplateError: If a template invokes itself.
        """
        return self._instantiate(tree, templates, ())

    def _instantiate(self, tree: 'Value', templates: Templates,
                     chain: tuple[str, ...]) -> 'Value':
        if is_sequence(tree):
            return [
                self._instantiate(item, templates, chain)
                for item in tree
            ]

        if is_mapping(tree):
            if self.names.generic_key in tree:
                return self._invoke(tree, templates, chain)
            return {
                key: self._instantiate(item, templates, chain)
                for key, item in tree.items()
                if not self.names.is_definition(key)
            }

        return tree

    def _invoke(self, node: 'Mapping', templates: Templates,
                chain: tuple[str, ...]) -> 'Value':
        """Replace an invocation node with its instantiated template."""
        invocation = self.parse_invocation(node)

        target = invocation.target
        if target not in templates:
            raise UnknownTemplateError(target, element=node)

        if target in chain:
            raise CircularTemplateError((*chain, target))

        bindings = {
            name: self._instantiate(value, templates, chain)
            for name, value in invocation.bindings.items()
        }
        body = self.substitute(templates[target], bindings)

        return self._instantiate(body, templates, (*chain, target))

    def parse_invocation(self, node: 'Mapping') -> GenericInvocation:
        """Validate an invocation node.

        Args:
            node: Mapping holding the invocation key.

        Returns:
            Validated invocation.

        Raises:
            MalformedDirectiveError: If the payload is not a mapping, or
                its target is missing or is not a string.
        """
        payload = node[self.names.generic_key]
        if not is_mapping(payload):
            raise MalformedDirectiveError(
                'value must be a mapping',
                directive=self.names.generic_key,
                element=node,
            )

        try:
            return GenericInvocation.from_payload(payload, self.names.target_key)

        except ValidationError as base:
            raise MalformedDirectiveError.from_pydantic_error(
                base,
                directive=self.names.generic_key,
                element=node,
            ) from base

    @classmethod
    def substitute(cls, body: 'Value', bindings: 'Mapping') -> 'Value':
        """Substitute placeholders of a template body.

        Only string values of mapping entries are substitution sites.
        A matching entry receives a copy of the bound value, which is not
        searched for further placeholders.

        Args:
            body: Template body.
            bindings: Placeholder name to bound value.

        Returns:
            New document tree with placeholders replaced.
        """
        if is_mapping(body):
            result = {}
            for key, item in body.items():
                if isinstance(item, str) and item in bindings:
                    result[key] = deepcopy(bindings[item])
                else:
                    result[key] = cls.substitute(item, bindings)
            return result

        if is_sequence(body):
            return [
                cls.substitute(item, bindings)
                for item in body
            ]

        return body
