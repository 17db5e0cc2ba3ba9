"""Command line interface for aar-transform."""
