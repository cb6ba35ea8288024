"""Declarative construct graph with aspects, policy checks and template synthesis."""

__version__ = "0.1.0"
