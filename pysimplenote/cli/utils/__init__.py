"""Helpers shared by the pysimplenote CLI commands."""
