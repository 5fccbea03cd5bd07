"""Inclusion directive resolution.

This module rewrites a document tree by replacing every inclusion
directive with the merged contents of the documents its pattern matches.

Included documents are resolved recursively before merging, relative to
their own directory, so no directive survives in the result. Merging
follows plain assignment semantics: a later document overrides the value
of a duplicate key, while the key keeps the position of its first
occurrence.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from docsplice.diagnostics import Event, NullDiagnostics
from docsplice.errors import (
    CircularIncludeError,
    EmptyIncludeWarning,
    LoadError,
    MalformedDirectiveError,
    ResolutionError,
)
from docsplice.schema import IncludeDirective, ReservedNames
from docsplice.values import is_mapping, is_sequence

from .issues import IssuesMixin
from .loader import load_pattern

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from docsplice.diagnostics import Diagnostics
    from docsplice.values import Value

#: Chain of documents being included, outermost first.
type IncludeChain = tuple[Path, ...]


class IncludeResolver(IssuesMixin):
    """Recursive resolver of inclusion directives.

    The resolver holds configuration only; every call to `resolve`
    works on its own include chain and accumulators, so one instance
    may be reused for several documents.
    """

    def __init__(self, names: ReservedNames | None = None, *,
                 diagnostics: 'Diagnostics | None' = None,
                 encoding: str = 'utf-8',
                 strict: bool = False) -> None:
        """Initialize the resolver.

        Args:
            names: Reserved directive spellings, defaults are used if omitted.
            diagnostics: Sink receiving one event per included file.
            encoding: Text encoding of included documents.
            strict: Whether to raise on patterns matching no files
                instead of emitting a warning.
        """
        self.names = names or ReservedNames()
        self.diagnostics = diagnostics or NullDiagnostics()
        self.encoding = encoding
        self.strict_mode = strict

    def resolve(self, tree: 'Value', base_path: Path, *,
                origin: Path | None = None) -> 'Value':
        """Resolve every inclusion directive of a document tree.

        Args:
            tree: Document tree to rewrite.
            base_path: Directory used to anchor relative patterns.
            origin: File the tree was loaded from, if any. Including it
                again from the tree is reported as a cycle.

        Returns:
            A new document tree free of inclusion directives.

        Raises:
            ResolutionError: If any matched file fails to load, or
                inclusion is circular.
            MalformedDirectiveError: If a directive has no string pattern.
        """
        chain: IncludeChain = ()
        if origin is not None:
            chain = (origin.resolve(),)

        return self._resolve(tree, base_path, chain)

    def _resolve(self, tree: 'Value', base_path: Path, chain: IncludeChain) -> 'Value':
        if is_sequence(tree):
            return [
                self._resolve(item, base_path, chain)
                for item in tree
            ]

        if is_mapping(tree):
            if self.names.include_key in tree:
                return self._include(tree, base_path, chain)
            return {
                key: self._resolve(item, base_path, chain)
                for key, item in tree.items()
            }

        return tree

    def _include(self, node: 'Mapping', base_path: Path, chain: IncludeChain) -> dict:
        """Replace a directive node with the merged included documents."""
        directive = self.parse_directive(node)

        documents = []
        try:
            for path, document in load_pattern(directive.pattern, base_path,
                                               encoding=self.encoding):
                identity = path.resolve()
                if identity in chain:
                    raise CircularIncludeError(path, chain)

                self.diagnostics.emit(Event(stage='include', message='Included', path=path))
                documents.append(self._resolve(document, path.parent, (*chain, identity)))

        except LoadError as base:
            raise ResolutionError(base.path, base, pattern=directive.pattern) from base

        if not documents and (error := self.emit_issue(
            ResolutionError(
                base_path / directive.pattern,
                pattern=directive.pattern,
                message=f'No files match {directive.pattern!r}',
            ),
            EmptyIncludeWarning,
        )):
            raise error

        return self.merge(documents)

    def parse_directive(self, node: 'Mapping') -> IncludeDirective:
        """Validate an inclusion directive node.

        Args:
            node: Mapping holding the inclusion key.

        Returns:
            Validated directive.

        Raises:
            MalformedDirectiveError: If the pattern is not a non-empty string.
        """
        try:
            return IncludeDirective.model_validate({
                'pattern': node[self.names.include_key],
            })

        except ValidationError as base:
            raise MalformedDirectiveError.from_pydantic_error(
                base,
                directive=self.names.include_key,
                element=node,
            ) from base

    @classmethod
    def merge(cls, documents: 'Iterable[Value]') -> dict:
        """Merge documents into a single mapping.

        Mappings are assigned key by key in order; sequences are
        flattened depth-first; any other value contributes nothing.

        Args:
            documents: Documents to merge, in precedence order.

        Returns:
            New merged mapping.
        """
        result: dict = {}
        for document in documents:
            cls._merge_into(result, document)

        return result

    @classmethod
    def _merge_into(cls, result: dict, document: 'Value') -> None:
        if is_mapping(document):
            for key, value in document.items():
                result[key] = value
        elif is_sequence(document):
            for item in document:
                cls._merge_into(result, item)
