"""Linked-data dereferencing and schema.org record projection."""

__version__ = "0.1.0"
