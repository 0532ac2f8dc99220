"""Logging setup shared by all kubestalk components."""
