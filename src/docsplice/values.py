"""Core type definitions for document trees.

This module defines the value model shared by every stage of the
preprocessor: scalars, ordered sequences and insertion-ordered mappings.

Python dictionaries keep insertion order and update existing keys in
place, which is exactly the ordering contract required for merging
included documents and for stable serialization.

It also provides utilities for recursively normalizing freshly parsed
YAML objects into strict document values.
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

#: Scalars are atomic leaves of a document tree. YAML timestamps are
#: kept as-is so they round-trip through serialization unchanged.
type Scalar = str | int | float | bool | date | datetime

#: A document value is a recursive tree of scalars, sequences and
#: mappings. Mapping keys are scalars, most commonly strings.
type Value = Scalar | Sequence['Value'] | Mapping['Scalar | None', 'Value'] | None

#: A value in runtime represents any Python object received from
#: the YAML loader prior to normalization into a strict `Value`.
type RuntimeValue = Any

MAPPINGS = (dict,)
SCALARS = (str, int, float, bool, date, datetime)
SEQUENCES = (list, tuple)


def is_mapping(value: RuntimeValue) -> bool:
    """Check whether a value is a mapping node."""
    return isinstance(value, MAPPINGS)


def is_sequence(value: RuntimeValue) -> bool:
    """Check whether a value is a sequence node."""
    return isinstance(value, SEQUENCES)


def _normalize_key(value: RuntimeValue) -> 'Scalar | None':
    """Validate and normalize a mapping key.

    Args:
        value: Candidate mapping key.

    Returns:
        The validated key.

    Raises:
        TypeError: If the provided key is not a hashable scalar.
    """
    if value is None:
        return None

    if not isinstance(value, SCALARS):
        raise TypeError(f'Can not use {value!r} as mapping key')

    return value


def normalize(value: RuntimeValue) -> Value:
    """Recursively normalize a runtime value into a document `Value`.

    Tuples are converted to lists and every mapping is rebuilt, so the
    result never shares containers with the input.

    Args:
        value: Runtime value to normalize.

    Returns:
        A fully normalized document value.

    Raises:
        TypeError: If the value type is unsupported.
    """
    if value is None:
        return None

    if isinstance(value, SCALARS):
        return value

    if isinstance(value, MAPPINGS):
        return {
            _normalize_key(key): normalize(item)
            for key, item in value.items()
        }

    if isinstance(value, SEQUENCES):
        return [
            normalize(item)
            for item in value
        ]

    raise TypeError(f'{value!r} has unsupported type')
