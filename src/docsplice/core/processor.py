"""Document processing pipeline.

The processor chains the preprocessing stages over a root document:

1. load the root file;
2. resolve inclusion directives relative to the root file directory;
3. extract generic definitions from the resolved tree;
4. instantiate generic invocations;
5. serialize the result to YAML text.

Each stage hands its complete output to the next one. Any failure aborts
the whole run and nothing is returned or written.
"""

from typing import TYPE_CHECKING

from docsplice.diagnostics import Event, NullDiagnostics
from docsplice.settings import Settings

from .generics import GenericResolver
from .includes import IncludeResolver
from .loader import dump_document, load_file

if TYPE_CHECKING:
    from pathlib import Path

    from docsplice.diagnostics import Diagnostics, Stage


class DocumentProcessor:
    """Preprocessing pipeline bound to a set of settings.

    The processor is stateless between runs and may process several
    documents in sequence.
    """

    def __init__(self, settings: Settings | None = None, *,
                 diagnostics: 'Diagnostics | None' = None) -> None:
        """Initialize the processor.

        Args:
            settings: Runtime settings, resolved from the environment if omitted.
            diagnostics: Sink receiving progress events of every stage.
        """
        self.settings = settings or Settings()
        self.diagnostics = diagnostics or NullDiagnostics()

        names = self.settings.reserved_names

        self.includes = IncludeResolver(
            names,
            diagnostics=self.diagnostics,
            encoding=self.settings.encoding,
            strict=self.settings.strict,
        )
        self.generics = GenericResolver(
            names,
            diagnostics=self.diagnostics,
            strict=self.settings.strict,
        )

    def notify(self, stage: 'Stage', message: str, path: 'Path | None' = None) -> None:
        """Emit a progress event."""
        self.diagnostics.emit(Event(stage=stage, message=message, path=path))

    def process(self, path: 'Path') -> str:
        """Process a root document into YAML text.

        Args:
            path: Path of the root document.

        Returns:
            Serialized result document.

        Raises:
            DocumentError: If any stage fails.
        """
        self.notify('load', 'Loading the input file', path)
        tree = load_file(path, encoding=self.settings.encoding)

        self.notify('include', 'Processing includings', path.parent)
        resolved = self.includes.resolve(tree, path.parent, origin=path)

        self.notify('instantiate', 'Processing generics')
        applied = self.generics.apply(resolved)

        content = dump_document(applied, indent=self.settings.indent)
        size = len(content.encode(self.settings.encoding))
        self.notify('dump', f'Output length: {size} bytes')

        return content

    def process_to(self, path: 'Path', output: 'Path') -> str:
        """Process a root document and write the result to a file.

        The result is written to a sibling staging file first and moved
        over the output, so a failed run never leaves a partial output.

        Args:
            path: Path of the root document.
            output: Path of the output document.

        Returns:
            Serialized result document.

        Raises:
            DocumentError: If any stage fails.
            OSError: If the output file can not be written.
        """
        content = self.process(path)

        staging = output.with_name(f'.{output.name}.partial')
        try:
            staging.write_text(content, encoding=self.settings.encoding)
            staging.replace(output)

        except OSError:
            staging.unlink(missing_ok=True)
            raise

        self.notify('write', 'Written', output)

        return content
