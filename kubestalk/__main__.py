"""Entry point for `python -m kubestalk`.

Usage:
    python -m kubestalk deployments my-app
    kubectl get pods -o yaml | python -m kubestalk -
"""

from __future__ import annotations

from kubestalk.cli import cli

cli()
