"""kubestalk -- watch Kubernetes resources and print diffs as they change."""

__version__ = "0.3.0"
