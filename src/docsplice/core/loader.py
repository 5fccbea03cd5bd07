"""Document loading and serialization.

This module turns files into document values and document values back
into YAML text. Parsing and emitting are delegated to PyYAML through
dedicated `SafeLoader` and `SafeDumper` subclasses, so constructors or
representers registered here never leak into PyYAML globals.

Inclusion patterns are expanded into a deterministic, lexicographically
sorted list of regular files. Callers rely on this order when merging.
"""

import re
from glob import glob
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from yaml import SafeDumper, SafeLoader, dump, load_all
from yaml.error import MarkedYAMLError, YAMLError

from docsplice.errors import LoadError
from docsplice.values import normalize

if TYPE_CHECKING:
    from collections.abc import Iterator

    from yaml.nodes import ScalarNode

    from docsplice.values import Value


class DocumentLoader(SafeLoader):
    """YAML loader used for every input document.

    Plain scalars are resolved with the YAML 1.2 core schema, so values
    such as `on`, `12:30` or `010` stay strings. Timestamps and merge
    keys are kept on top of the core schema.
    """

    yaml_implicit_resolvers: ClassVar[dict] = {}

    def construct_yaml_int(self, node: 'ScalarNode') -> int:
        """Construct an integer, including `0o` octal notation."""
        value = self.construct_scalar(node)
        if value.startswith('0o'):
            return int(value[2:], 8)

        return super().construct_yaml_int(node)


DocumentLoader.add_constructor('tag:yaml.org,2002:int', DocumentLoader.construct_yaml_int)

#: Implicit resolvers of the YAML 1.2 core schema, in resolution order.
CORE_RESOLVERS = (
    (
        'tag:yaml.org,2002:null',
        re.compile(r'^(?:~|null|Null|NULL|)$'),
        ['~', 'n', 'N', ''],
    ),
    (
        'tag:yaml.org,2002:bool',
        re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
        list('tTfF'),
    ),
    (
        'tag:yaml.org,2002:int',
        re.compile(r'''^(?:[-+]?(?:0|[1-9][0-9]*)
                    |0o[0-7]+
                    |0x[0-9a-fA-F]+)$''', re.X),
        list('-+0123456789'),
    ),
    (
        'tag:yaml.org,2002:float',
        re.compile(r'''^(?:[-+]?(?:\.[0-9]+|[0-9]+\.[0-9]*)(?:[eE][-+]?[0-9]+)?
                    |[-+]?[0-9]+[eE][-+]?[0-9]+
                    |[-+]?\.(?:inf|Inf|INF)
                    |\.(?:nan|NaN|NAN))$''', re.X),
        list('-+.0123456789'),
    ),
)

#: Resolvers kept from the YAML 1.1 schema of the safe loader.
INHERITED_TAGS = frozenset({
    'tag:yaml.org,2002:merge',
    'tag:yaml.org,2002:timestamp',
})


def _install_resolvers() -> None:
    """Register implicit resolvers of the document loader."""
    for tag, regexp, first in CORE_RESOLVERS:
        DocumentLoader.add_implicit_resolver(tag, regexp, first)

    for first, resolvers in SafeLoader.yaml_implicit_resolvers.items():
        for tag, regexp in resolvers:
            if tag in INHERITED_TAGS:
                DocumentLoader.add_implicit_resolver(tag, regexp, [first])


_install_resolvers()


class DocumentDumper(SafeDumper):
    """YAML dumper used for the output document.

    Anchors and aliases are never emitted: every node of a processed
    tree is written out in full.
    """

    def ignore_aliases(self, data: object) -> bool:  # noqa: ARG002
        """Disable anchors for all nodes."""
        return True


def load_text(content: str, path: Path) -> 'Value':
    """Parse the first YAML document of a text.

    Args:
        content: YAML text.
        path: Origin of the text, used for error reporting.

    Returns:
        Normalized document value.

    Raises:
        LoadError: If the text is not valid YAML, holds no document,
            or holds values outside the document model.
    """
    try:
        documents = list(load_all(content, Loader=DocumentLoader))

    except MarkedYAMLError as base:
        raise LoadError.from_yaml_error(path, base) from base

    except YAMLError as base:
        raise LoadError(path, base, reason='Invalid YAML') from base

    if not documents:
        raise LoadError(path, reason='File contains no YAML document')

    try:
        return normalize(documents[0])

    except TypeError as base:
        raise LoadError(path, base, reason=f'Unsupported value, {base}') from base


def load_file(path: Path, *, encoding: str = 'utf-8') -> 'Value':
    """Load a document value from a file.

    The file is read entirely and closed before parsing starts.

    Args:
        path: Path of the document.
        encoding: Text encoding of the document.

    Returns:
        Normalized document value.

    Raises:
        LoadError: If the file can not be read or parsed.
    """
    try:
        with path.open('rt', encoding=encoding) as source:
            content = source.read()

    except (OSError, UnicodeDecodeError) as base:
        raise LoadError(path, base) from base

    return load_text(content, path)


def expand_pattern(pattern: str, base_path: Path) -> list[Path]:
    """Expand a glob pattern into the files it matches.

    Relative patterns are expanded under the base directory, absolute
    patterns are used verbatim. Only regular files are returned, sorted
    lexicographically so the result is reproducible across runs.

    Args:
        pattern: Glob pattern, `**` matches nested directories.
        base_path: Directory used to anchor relative patterns.

    Returns:
        Sorted list of matched file paths.
    """
    if Path(pattern).is_absolute():
        matches = [Path(item) for item in glob(pattern, recursive=True)]
    else:
        matches = [
            base_path / item
            for item in glob(pattern, root_dir=base_path, recursive=True)
        ]

    return sorted(path for path in matches if path.is_file())


def load_pattern(pattern: str, base_path: Path, *,
                 encoding: str = 'utf-8') -> 'Iterator[tuple[Path, Value]]':
    """Load every document matched by a glob pattern.

    Files are loaded lazily and in pattern order; iteration stops with
    the first failure.

    Args:
        pattern: Glob pattern, see `expand_pattern`.
        base_path: Directory used to anchor relative patterns.
        encoding: Text encoding of the documents.

    Yields:
        Pairs of file path and loaded document value.

    Raises:
        LoadError: If any matched file can not be loaded.
    """
    for path in expand_pattern(pattern, base_path):
        yield path, load_file(path, encoding=encoding)


def dump_document(value: 'Value', *, indent: int = 2) -> str:
    """Serialize a document value to YAML text.

    Keys are written in insertion order and the output starts with an
    explicit document marker.

    Args:
        value: Document value to serialize.
        indent: Indentation width.

    Returns:
        YAML text.
    """
    return dump(
        value,
        Dumper=DocumentDumper,
        indent=indent,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        explicit_start=True,
    )
