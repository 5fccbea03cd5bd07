"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report document loading failures, inclusion and generic resolution
failures, and non-fatal issues in a structured and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump
from yaml.error import MarkedYAMLError

from docsplice.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file.
    line_num: int | None
    #: Column number in the source file.
    column_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Document node associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting document errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and YAML-based
    snippets of the offending node.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        location = cls.get_location_string(context, indent=FORMAT_INDENT)
        snippet = cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        if location:
            message += linesep + location
        if snippet:
            message += linesep + snippet

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line and
            column numbers when available, otherwise an empty string.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        line_num = context.get('line_num')
        if not filename and line_num is None:
            return ''

        message = f'{indent}in "{filename or FORMAT_FILENAME}"'
        if line_num is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing node or exception data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        error = context.get('error')
        if isinstance(error, MarkedYAMLError) and error.problem_mark is not None:
            snippet = error.problem_mark.get_snippet(indent=0) or ''
            return cls._make_indent(snippet, indent)

        if (element := context.get('element')) is not None:
            return f'{indent}{SNIPPET_ELLIPSIS}{cls._make_yaml(element, indent)}'

        return ''

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                cls._filter_unsafe(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
            allow_unicode=True,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.

        Args:
            value: Original multi-line string.
            indent: Indentation prefix.

        Returns:
            Indented string.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class DocumentWarning(UserWarning):
    """Base warning for non-fatal document issues.

    Warnings are emitted when processing can continue with a well-defined
    result. In strict mode the corresponding error is raised instead.
    """


class TemplateShadowWarning(DocumentWarning):
    """Warning emitted when a template definition replaces an earlier one."""


class EmptyIncludeWarning(DocumentWarning):
    """Warning emitted when an inclusion pattern matches no files."""


class DocumentError(Exception, ErrorFormatter):
    """Base exception for all docsplice errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location and node.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class LoadError(DocumentError):
    """Error raised when a file can not be read or parsed as a document."""

    def __init__(self, path: 'Path', cause: Exception | None = None, *,
                 reason: str | None = None,
                 context: ErrorContext | None = None) -> None:
        """Initialize a load error.

        Args:
            path: Path of the file that failed to load.
            cause: Underlying exception, if any.
            reason: Human-readable reason, defaults to the cause text.
            context: Error context containing optional location.
        """
        self.path = path
        self.cause = cause

        if reason is None:
            reason = str(cause) if cause is not None else 'Unknown error'

        super().__init__(f'Can not load {str(path)!r}: {reason}', context=context)

    @classmethod
    def from_yaml_error(cls, path: 'Path', error: MarkedYAMLError) -> 'Self':
        """Create a load error from a YAML parsing failure.

        Args:
            path: Path of the file being parsed.
            error: Exception raised by the YAML parser.

        Returns:
            LoadError pointing at the failing position.
        """
        error_context = ErrorContext(filename=str(path), error=error)
        if (mark := error.problem_mark) is not None:
            error_context['line_num'] = mark.line
            error_context['column_num'] = mark.column

        reason = 'Invalid YAML'
        if error.problem:
            reason += f', {error.problem}'

        return cls(path, error, reason=reason, context=error_context)


class ResolutionError(DocumentError):
    """Error raised when an inclusion directive can not be resolved.

    Wraps the failure met while loading one of the files matched by
    the inclusion pattern.
    """

    def __init__(self, path: 'Path', cause: DocumentError | None = None, *,
                 pattern: str | None = None,
                 message: str | None = None) -> None:
        """Initialize a resolution error.

        Args:
            path: Offending file or pattern path.
            cause: Underlying load error.
            pattern: Inclusion pattern being resolved.
            message: Custom message, defaults to the cause message.
        """
        self.path = path
        self.cause = cause
        self.pattern = pattern

        if message is None:
            message = 'Failed to include'
            if pattern is not None:
                message += f' {pattern!r}'
            if cause is not None:
                message += f': {cause.message}'

        context = None
        if cause is not None:
            context = cause.context

        super().__init__(message, context=context)


class CircularIncludeError(ResolutionError):
    """Error raised when a document includes itself."""

    def __init__(self, path: 'Path', chain: 'Sequence[Path]') -> None:
        """Initialize a circular inclusion error.

        Args:
            path: Document included a second time.
            chain: Chain of including documents, outermost first.
        """
        self.chain = (*chain, path)

        super().__init__(
            path,
            message=(
                'Circular inclusion: '
                + ' -> '.join(str(item) for item in self.chain)
            ),
        )


class MalformedDirectiveError(DocumentError):
    """Error raised when a directive node has an invalid shape."""

    def __init__(self, message: str, *, directive: str,
                 element: Any = None) -> None:  # noqa: ANN401
        """Initialize a malformed directive error.

        Args:
            message: Human-readable error description.
            directive: Reserved key of the offending directive.
            element: Offending directive node.
        """
        self.directive = directive

        context = None
        if element is not None:
            context = ErrorContext(element=element)

        super().__init__(f'Malformed {directive!r} directive: {message}', context=context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            directive: str,
                            element: Any = None) -> 'Self':  # noqa: ANN401
        """Create a directive error from a Pydantic validation failure.

        The first reported issue becomes the message.

        Args:
            error: ValidationError raised by Pydantic.
            directive: Reserved key of the offending directive.
            element: Offending directive node.

        Returns:
            MalformedDirectiveError representing the validation failure.
        """
        message = 'validation error'
        for item in error.errors(include_url=False, include_input=False):
            location = '.'.join(str(part) for part in item['loc'])
            message = f'{location}: {item['msg']}' if location else item['msg']
            break

        return cls(message, directive=directive, element=element)


class UnknownTemplateError(DocumentError):
    """Error raised when an invocation targets an undefined template."""

    def __init__(self, target: str, *, element: Any = None) -> None:  # noqa: ANN401
        """Initialize an unknown template error.

        Args:
            target: Requested template name.
            element: Offending invocation node.
        """
        self.target = target

        context = None
        if element is not None:
            context = ErrorContext(element=element)

        super().__init__(f'There is no generic found for {target!r}', context=context)


class DuplicateTemplateError(DocumentError):
    """Error raised in strict mode when a template name is declared twice."""

    def __init__(self, name: str) -> None:
        """Initialize a duplicate template error.

        Args:
            name: Template name declared more than once.
        """
        self.name = name

        super().__init__(f'Generic {name!r} is shadowing an existing')


class CircularTemplateError(DocumentError):
    """Error raised when a template invokes itself."""

    def __init__(self, chain: 'Sequence[str]') -> None:
        """Initialize a circular template error.

        Args:
            chain: Chain of template names, outermost first, ending with
                the template invoked a second time.
        """
        self.chain = tuple(chain)

        super().__init__(f'Circular generic: {' -> '.join(self.chain)}')
