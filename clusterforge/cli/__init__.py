"""Clusterforge CLI — Typer-based command-line interface.

Provides the ``clusterforge`` command with subcommands for generating key
pairs, launching a cluster, and inspecting the asset graph.

All output uses Rich for formatted terminal display.
"""
