"""Diagnostics sinks.

Every processing stage reports progress through an explicitly passed
sink instead of a process-wide logger. A sink receives immutable
`Event` records and decides what to do with them: drop them, keep them
for inspection, or print them to the console.

Non-fatal issues are not events; they are emitted as warnings
(see `docsplice.errors.DocumentWarning`).
"""

from pathlib import Path  # noqa: TC003
from typing import Literal, Protocol

from click import echo

from docsplice.models import SchemaModel

#: Processing stage an event belongs to.
type Stage = Literal['load', 'include', 'extract', 'instantiate', 'dump', 'write']


class Event(SchemaModel):
    """Informational diagnostics record."""

    stage: Stage
    message: str
    path: Path | None = None

    def __str__(self) -> str:
        """String representation."""
        if self.path is None:
            return self.message
        return f'{self.message}: {self.path}'


class Diagnostics(Protocol):
    """Sink receiving diagnostics events."""

    def emit(self, event: Event) -> None:
        """Receive a single event."""
        ...  # pragma: no cover


class NullDiagnostics:
    """Sink discarding every event."""

    def emit(self, event: Event) -> None:
        """Drop the event."""
        return None


class MemoryDiagnostics:
    """Sink keeping events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        """Record the event."""
        self.events.append(event)

    def messages(self, stage: Stage | None = None) -> list[str]:
        """List recorded messages, optionally filtered by stage."""
        return [
            event.message
            for event in self.events
            if stage is None or event.stage == stage
        ]


class ConsoleDiagnostics:
    """Sink printing events to the standard output.

    Events are printed only in verbose mode.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def emit(self, event: Event) -> None:
        """Print the event when verbose."""
        if self.verbose:
            echo(f'[{event.stage}] {event}')
