"""Build-time preprocessor for YAML documentation sources.

The `docsplice` package assembles a single YAML document from many files.

Key features:
- `$include` directives splicing in the merged contents of glob-matched
  documents, resolved recursively;
- `<GENERIC>` template definitions and `$generic` invocations
  instantiating them with caller-supplied bindings;
- a strict mode turning shadowed templates and empty includes into errors.

It is designed for API specifications split across many files, where
reusable parameterized fragments keep the sources small and consistent.
"""
