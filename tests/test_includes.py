"""Tests for inclusion directive resolution."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from docsplice.core import IncludeResolver, load_file
from docsplice.errors import (
    CircularIncludeError,
    EmptyIncludeWarning,
    LoadError,
    MalformedDirectiveError,
    ResolutionError,
)
from docsplice.schema import ReservedNames

if TYPE_CHECKING:
    from collections.abc import Callable

    from docsplice.diagnostics import MemoryDiagnostics

type MakeFiles = Callable[[dict[str, str]], Path]


@pytest.mark.parametrize('tree', (
    pytest.param(None, id='null'),
    pytest.param('text', id='scalar'),
    pytest.param([1, 'two', [3.0, None]], id='sequence'),
    pytest.param({'a': {'b': [1, {'c': True}]}, 'include': 'x.yaml'}, id='mapping'),
))
def test_plain_tree_unchanged(tree: object, tmp_path: Path) -> None:
    """Return trees without directives unchanged."""
    assert IncludeResolver().resolve(tree, tmp_path) == tree


def test_merge_override(make_files: MakeFiles) -> None:
    """Merge matched documents, later values win at the first position."""
    base = make_files({
        'parts/a.yaml': 'x: 1\ny: 2\n',
        'parts/b.yaml': 'y: 3\nz: 4\n',
    })

    result = IncludeResolver().resolve({'$include': 'parts/*.yaml'}, base)

    assert result == {'x': 1, 'y': 3, 'z': 4}
    assert list(result) == ['x', 'y', 'z']


def test_nested_directive(make_files: MakeFiles) -> None:
    """Replace directives nested in mappings and sequences in place."""
    base = make_files({
        'paths/users.yaml': '/users:\n  get: {}\n',
        'tags.yaml': 'users: {description: Users}\n',
    })
    tree = {
        'openapi': '3.0.0',
        'paths': {'$include': 'paths/*.yaml'},
        'tags': [{'$include': 'tags.yaml'}, 'other'],
        'info': {'title': 'API'},
    }

    result = IncludeResolver().resolve(tree, base)

    assert result == {
        'openapi': '3.0.0',
        'paths': {'/users': {'get': {}}},
        'tags': [{'users': {'description': 'Users'}}, 'other'],
        'info': {'title': 'API'},
    }
    assert list(result) == ['openapi', 'paths', 'tags', 'info']


def test_recursive_inclusion(make_files: MakeFiles) -> None:
    """Resolve includes of included documents relative to their directory."""
    base = make_files({
        'parts/a.yaml': 'a: 1\nnested:\n  $include: sub/*.yaml\n',
        'parts/sub/c.yaml': 'c:\n  $include: ../../leaf.yaml\n',
        'leaf.yaml': 'leaf: yes\n',
    })

    result = IncludeResolver().resolve({'$include': 'parts/*.yaml'}, base)

    assert result == {'a': 1, 'nested': {'c': {'leaf': 'yes'}}}


def test_shared_inclusion(make_files: MakeFiles) -> None:
    """Allow the same document to be included from sibling branches."""
    base = make_files({
        'x/a.yaml': '$include: ../shared.yaml\n',
        'x/b.yaml': 'b: 2\nextra:\n  $include: ../shared.yaml\n',
        'shared.yaml': 's: 1\n',
    })

    result = IncludeResolver().resolve({'$include': 'x/*.yaml'}, base)

    assert result == {'s': 1, 'b': 2, 'extra': {'s': 1}}


def test_flatten_sequences(make_files: MakeFiles) -> None:
    """Flatten sequence documents and ignore scalar items."""
    base = make_files({
        'list.yaml': '- a: 1\n- - b: 2\n  - a: 3\n- 4\n- text\n',
    })

    result = IncludeResolver().resolve({'$include': 'list.yaml'}, base)

    assert result == {'a': 3, 'b': 2}
    assert list(result) == ['a', 'b']


def test_scalar_document_ignored(make_files: MakeFiles) -> None:
    """Ignore scalar documents when merging."""
    base = make_files({
        'a.yaml': 'just text\n',
        'b.yaml': 'b: 1\n',
    })

    assert IncludeResolver().resolve({'$include': '*.yaml'}, base) == {'b': 1}


def test_directive_siblings_discarded(make_files: MakeFiles) -> None:
    """Replace the whole directive mapping, dropping sibling keys."""
    base = make_files({'a.yaml': 'a: 1\n'})

    result = IncludeResolver().resolve({'$include': 'a.yaml', 'extra': 1}, base)

    assert result == {'a': 1}


def test_absolute_pattern(make_files: MakeFiles, tmp_path: Path) -> None:
    """Use absolute patterns verbatim."""
    base = make_files({'shared/a.yaml': 'a: 1\n'})
    pattern = str(base / 'shared' / '*.yaml')

    assert IncludeResolver().resolve({'$include': pattern}, tmp_path / 'other') == {'a': 1}


def test_merge() -> None:
    """Merge mappings and nested sequences of mappings in order."""
    result = IncludeResolver.merge([
        {'a': 1},
        'ignored',
        [{'b': 2}, [{'a': 3}], None],
        42,
    ])

    assert result == {'a': 3, 'b': 2}
    assert list(result) == ['a', 'b']


def test_load_failure_aborts(make_files: MakeFiles) -> None:
    """Abort resolution when any matched file fails to load."""
    base = make_files({
        'parts/a.yaml': 'a: 1\n',
        'parts/b.yaml': 'b: [1\n',
    })
    tree = {'ok': {'$include': 'parts/a.yaml'}, 'bad': {'$include': 'parts/*.yaml'}}

    with pytest.raises(ResolutionError, match=r"Failed to include 'parts/\*\.yaml'") as error:
        IncludeResolver().resolve(tree, base)

    assert error.value.path == base / 'parts' / 'b.yaml'
    assert error.value.pattern == 'parts/*.yaml'
    assert isinstance(error.value.cause, LoadError)


def test_nested_load_failure_propagates(make_files: MakeFiles) -> None:
    """Propagate failures of nested includes unchanged."""
    base = make_files({
        'a.yaml': 'inner:\n  $include: sub/broken.yaml\n',
        'sub/broken.yaml': 'b: [1\n',
    })

    with pytest.raises(ResolutionError) as error:
        IncludeResolver().resolve({'$include': 'a.yaml'}, base)

    assert error.value.pattern == 'sub/broken.yaml'
    assert error.value.path == base / 'sub' / 'broken.yaml'


def test_circular_inclusion(make_files: MakeFiles) -> None:
    """Detect documents including each other."""
    base = make_files({
        'a.yaml': '$include: b.yaml\n',
        'b.yaml': 'b:\n  $include: a.yaml\n',
    })

    with pytest.raises(CircularIncludeError, match=r'^Circular inclusion: ') as error:
        IncludeResolver().resolve({'$include': 'a.yaml'}, base)

    assert [path.name for path in error.value.chain] == ['a.yaml', 'b.yaml', 'a.yaml']


def test_self_inclusion(make_files: MakeFiles) -> None:
    """Detect a root document including itself."""
    base = make_files({'root.yaml': 'root:\n  $include: "*.yaml"\n'})
    root = base / 'root.yaml'

    with pytest.raises(CircularIncludeError):
        IncludeResolver().resolve(load_file(root), base, origin=root)


def test_empty_inclusion(tmp_path: Path) -> None:
    """Warn about patterns matching no files and include nothing."""
    with pytest.warns(EmptyIncludeWarning, match=r"No files match 'missing/\*\.yaml'"):
        result = IncludeResolver().resolve({'a': {'$include': 'missing/*.yaml'}}, tmp_path)

    assert result == {'a': {}}


def test_empty_inclusion_strict(tmp_path: Path) -> None:
    """Fail on patterns matching no files in strict mode."""
    with pytest.raises(ResolutionError, match=r'No files match'):
        IncludeResolver(strict=True).resolve({'$include': 'missing.yaml'}, tmp_path)


@pytest.mark.parametrize('pattern', (
    pytest.param(42, id='int'),
    pytest.param('', id='empty'),
    pytest.param(None, id='null'),
    pytest.param(['a.yaml'], id='sequence'),
))
def test_malformed_directive(pattern: object, tmp_path: Path) -> None:
    """Reject directives without a non-empty string pattern."""
    with pytest.raises(MalformedDirectiveError, match=r"^Malformed '\$include' directive"):
        IncludeResolver().resolve({'key': {'$include': pattern}}, tmp_path)


def test_custom_include_key(make_files: MakeFiles) -> None:
    """Recognize a configured inclusion key only."""
    base = make_files({'a.yaml': 'a: 1\n'})
    resolver = IncludeResolver(ReservedNames(include_key='@import'))

    result = resolver.resolve({'x': {'@import': 'a.yaml'}, 'y': {'$include': 'a.yaml'}}, base)

    assert result == {'x': {'a': 1}, 'y': {'$include': 'a.yaml'}}


def test_included_events(make_files: MakeFiles, diagnostics: 'MemoryDiagnostics') -> None:
    """Report every included file in loading order."""
    base = make_files({
        'parts/b.yaml': 'b: 1\n',
        'parts/a.yaml': 'a: 1\n',
    })

    IncludeResolver(diagnostics=diagnostics).resolve({'$include': 'parts/*.yaml'}, base)

    assert [event.path for event in diagnostics.events] == [
        base / 'parts' / 'a.yaml',
        base / 'parts' / 'b.yaml',
    ]
    assert diagnostics.messages('include') == ['Included', 'Included']


def test_result_not_shared(make_files: MakeFiles) -> None:
    """Produce new containers instead of mutating the input tree."""
    base = make_files({'a.yaml': 'a: 1\n'})
    tree = {'keep': {'nested': [1]}, 'inc': {'$include': 'a.yaml'}}

    result = IncludeResolver().resolve(tree, base)

    assert tree == {'keep': {'nested': [1]}, 'inc': {'$include': 'a.yaml'}}
    assert result['keep'] is not tree['keep']
    assert result['keep']['nested'] is not tree['keep']['nested']
