"""CLI command modules for hrcmd."""
