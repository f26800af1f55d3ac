"""Semantic Lens: derive hierarchies, column profiles and networks from flat tabular data."""

__version__ = "0.1.0"
