"""Strict mode handling of non-fatal document issues."""

from typing import TYPE_CHECKING
from warnings import warn

from docsplice.diagnostics import NullDiagnostics

if TYPE_CHECKING:
    from docsplice.diagnostics import Diagnostics
    from docsplice.errors import DocumentError, DocumentWarning
    from docsplice.schema import ReservedNames


class IssuesMixin:
    """Mixin defining how resolvers report recoverable issues.

    Attributes:
        strict_mode: If True, any issue is returned as an error for the
            caller to raise. If False, issues are emitted as warnings and
            processing continues.
        diagnostics: Sink receiving informational events.
        names: Reserved directive spellings.
    """

    strict_mode: bool = False

    diagnostics: 'Diagnostics' = NullDiagnostics()
    names: 'ReservedNames'

    def emit_issue(self, error: 'DocumentError',
                   category: type['DocumentWarning']) -> 'DocumentError | None':
        """Emit a document warning or return the exception.

        Args:
            error: Error describing the issue.
            category: Warning category used in non-strict mode.

        Returns:
            The error on strict mode, otherwise `None`
                with producing a warning of the given category.
        """
        if self.strict_mode:
            return error

        warn(error.message, category=category, stacklevel=3)

        return None
