"""Command line interface for reprosetup."""
