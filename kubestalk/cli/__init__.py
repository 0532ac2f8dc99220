"""kubestalk command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``kubestalk`` script).
"""

from kubestalk.cli.main import cli

__all__ = ["cli"]
