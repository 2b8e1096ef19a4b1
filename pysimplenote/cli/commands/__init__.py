"""Command modules for the pysimplenote CLI."""

from pysimplenote.cli.commands import config, notes

__all__ = ["config", "notes"]
