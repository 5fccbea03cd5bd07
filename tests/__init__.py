"""Test suite for the docsplice package.

This package contains unit and integration tests validating document
loading, inclusion resolution, generic templates, the processing
pipeline, and the command-line interface.
"""
