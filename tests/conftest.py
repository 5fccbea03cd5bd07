"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from docsplice.diagnostics import MemoryDiagnostics

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def make_files(tmp_path: 'Path') -> 'Callable[[dict[str, str]], Path]':
    """Provide a factory writing YAML sources into a temporary directory.

    The factory accepts a mapping from relative file path to file contents,
    creates intermediate directories as needed, and returns the directory
    the files were written to.
    """
    def make(files: dict[str, str]) -> 'Path':
        """Write files under the temporary directory.

        Args:
            files: Relative file path to text contents.

        Returns:
            The temporary directory.
        """
        for name, contents in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(contents, encoding='utf-8')

        return tmp_path

    return make


@pytest.fixture
def diagnostics() -> MemoryDiagnostics:
    """Provide a sink recording diagnostics events."""
    return MemoryDiagnostics()
