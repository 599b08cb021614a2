"""Command line interface for linkoftrust."""
