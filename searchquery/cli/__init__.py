"""Command line interface for searchquery (`searchquery parse`, `searchquery match`)."""
