"""Tests for the command-line interface."""

import os
from typing import TYPE_CHECKING

import pytest
import yaml
from click.testing import CliRunner

from docsplice.__main__ import cli

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from pytest_mock import MockerFixture

type MakeFiles = Callable[[dict[str, str]], Path]


@pytest.fixture
def sources(make_files: MakeFiles) -> 'Path':
    """Provide a root document with an include and a generic."""
    base = make_files({
        'api.yaml': (
            'title: API\n'
            'schemas:\n'
            '  $include: schemas/*.yaml\n'
            'user:\n'
            '  $generic:\n'
            '    target: Named\n'
            '    T: string\n'
        ),
        'schemas/named.yaml': 'Named<GENERIC>:\n  name: T\n',
    })

    return base / 'api.yaml'


def test_cli_success(sources: 'Path', tmp_path: 'Path') -> None:
    """Write the processed document and exit successfully."""
    output = tmp_path / 'out.yaml'

    result = CliRunner().invoke(cli, [str(sources), '-o', str(output)])

    assert result.exit_code == 0, result.output
    assert result.output == ''
    assert yaml.safe_load(output.read_text()) == {
        'title': 'API',
        'schemas': {},
        'user': {'name': 'string'},
    }


def test_cli_verbose(sources: 'Path', tmp_path: 'Path') -> None:
    """Print progress in verbose mode."""
    output = tmp_path / 'out.yaml'

    result = CliRunner().invoke(cli, [str(sources), '--out', str(output), '--verbose'])

    assert result.exit_code == 0, result.output
    assert 'input file  : ' in result.output
    assert '[include] Included: ' in result.output
    assert "[extract] Generic 'Named'" in result.output
    assert 'Output length: ' in result.output
    assert result.output.rstrip().endswith('All done')


def test_cli_failure(make_files: MakeFiles) -> None:
    """Report failures and write no output."""
    base = make_files({'api.yaml': 'a:\n  $generic:\n    target: Missing\n'})
    output = base / 'out.yaml'

    result = CliRunner().invoke(cli, [str(base / 'api.yaml'), '-o', str(output)])

    assert result.exit_code == 1
    assert "Error: There is no generic found for 'Missing'" in result.output
    assert not output.exists()


def test_cli_missing_input(tmp_path: 'Path') -> None:
    """Reject a missing input file."""
    result = CliRunner().invoke(cli, [str(tmp_path / 'missing.yaml')])

    assert result.exit_code != 0
    assert 'does not exist' in result.output


def test_cli_warnings(make_files: MakeFiles) -> None:
    """Print warnings and continue in non-strict mode."""
    base = make_files({'api.yaml': 'a:\n  $include: missing/*.yaml\n'})
    output = base / 'out.yaml'

    result = CliRunner().invoke(cli, [str(base / 'api.yaml'), '-o', str(output)])

    assert result.exit_code == 0, result.output
    assert "Warning: No files match 'missing/*.yaml'" in result.output
    assert yaml.safe_load(output.read_text()) == {'a': {}}


def test_cli_strict(make_files: MakeFiles) -> None:
    """Fail on warnings in strict mode."""
    base = make_files({'api.yaml': 'a:\n  $include: missing/*.yaml\n'})
    output = base / 'out.yaml'

    result = CliRunner().invoke(cli, [str(base / 'api.yaml'), '-o', str(output), '--strict'])

    assert result.exit_code == 1
    assert "Error: No files match 'missing/*.yaml'" in result.output
    assert not output.exists()


def test_cli_environment(sources: 'Path', tmp_path: 'Path', mocker: 'MockerFixture') -> None:
    """Resolve the output path from the environment."""
    output = tmp_path / 'from-env.yaml'
    mocker.patch.dict(os.environ, {'DOCSPLICE_OUTPUT': str(output)})

    result = CliRunner().invoke(cli, [str(sources)])

    assert result.exit_code == 0, result.output
    assert output.exists()


def test_cli_invalid_environment(sources: 'Path', mocker: 'MockerFixture') -> None:
    """Report invalid settings from the environment."""
    mocker.patch.dict(os.environ, {'DOCSPLICE_INDENT': 'wide'})

    result = CliRunner().invoke(cli, [str(sources)])

    assert result.exit_code == 1
    assert 'Error: Invalid settings' in result.output
