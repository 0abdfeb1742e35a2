"""Command-line interface for opsbot (``opsbot --help``)."""
