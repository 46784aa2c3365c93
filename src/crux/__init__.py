"""Crux - interactive terminal console for an operations agent."""

__version__ = "0.3.0"
