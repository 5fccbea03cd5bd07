"""Document tree rewriting engine.

This package defines the core infrastructure of the preprocessor:
- loading YAML documents and expanding inclusion patterns;
- recursive resolution and merging of inclusion directives;
- extraction and instantiation of generic templates;
- the pipeline chaining these stages into serialized output.

The primary public entry point is `DocumentProcessor`.
"""

from .generics import GenericResolver, Templates
from .includes import IncludeResolver
from .loader import dump_document, expand_pattern, load_file, load_pattern, load_text
from .processor import DocumentProcessor

__all__ = (
    'DocumentProcessor',
    'GenericResolver',
    'IncludeResolver',
    'Templates',
    'dump_document',
    'expand_pattern',
    'load_file',
    'load_pattern',
    'load_text',
)
