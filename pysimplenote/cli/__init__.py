"""Command line interface for pysimplenote."""
