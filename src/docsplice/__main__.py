"""Command-line interface of the preprocessor.

Resolves inclusion directives and generic templates of a root YAML
document and writes the serialized result. Options override settings
resolved from `DOCSPLICE_*` environment variables.
"""

from pathlib import Path
from warnings import catch_warnings, showwarning, simplefilter

from click import ClickException, argument, command, echo, option
from click import Path as PathParam
from pydantic import ValidationError

from docsplice.core import DocumentProcessor
from docsplice.diagnostics import ConsoleDiagnostics
from docsplice.errors import DocumentError, DocumentWarning
from docsplice.settings import Settings

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)

OutputFilepath = PathParam(
    dir_okay=False,
    writable=True,
    path_type=Path,
)


def _make_settings(output: Path | None, verbose: bool, strict: bool) -> Settings:
    """Resolve settings, command-line options take precedence.

    Args:
        output: Output path option, if given.
        verbose: Whether the verbose flag is set.
        strict: Whether the strict flag is set.

    Returns:
        Resolved settings.

    Raises:
        ClickException: If the environment holds invalid settings.
    """
    overrides: dict[str, Path | bool] = {}
    if output is not None:
        overrides['output'] = output
    if verbose:
        overrides['verbose'] = True
    if strict:
        overrides['strict'] = True

    try:
        return Settings(**overrides)

    except ValidationError as base:
        raise ClickException(f'Invalid settings: {base}') from base


@command(
    name='docsplice',
    help=(
        'Resolve $include directives and <GENERIC> templates of a YAML '
        'document INPUT_FILE and write the result.'
    ),
)
@argument('input_file', type=InputFilepath)
@option(
    '-o', '--out', 'output',
    type=OutputFilepath,
    default=None,
    help='Output path for the processed document.',
)
@option(
    '-v', '--verbose',
    is_flag=True,
    default=False,
    help='Print processing progress.',
)
@option(
    '--strict',
    is_flag=True,
    default=False,
    help='Fail on shadowed generics and includes matching no files.',
)
def cli(input_file: Path, output: Path | None, verbose: bool, strict: bool) -> None:
    """Process a root document into the output file."""
    settings = _make_settings(output, verbose, strict)

    if settings.verbose:
        echo(f'input file  : {input_file}')
        echo(f'output file : {settings.output}')
        echo(f'base path   : {input_file.parent}')

    processor = DocumentProcessor(
        settings,
        diagnostics=ConsoleDiagnostics(settings.verbose),
    )

    failure: Exception | None = None
    with catch_warnings(record=True) as caught:
        simplefilter('always')
        try:
            processor.process_to(input_file, settings.output)

        except (DocumentError, OSError) as error:
            failure = error

    for item in caught:
        if issubclass(item.category, DocumentWarning):
            echo(f'Warning: {item.message}', err=True)
        else:
            showwarning(item.message, item.category, item.filename, item.lineno)

    if failure is not None:
        raise ClickException(str(failure)) from failure

    if settings.verbose:
        echo('All done')


if __name__ == '__main__':
    cli()
