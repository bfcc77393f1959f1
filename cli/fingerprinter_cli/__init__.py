"""Command-line interface for the version fingerprinter."""
