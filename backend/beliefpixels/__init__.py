"""Belief pixels: extract, embed, store and project beliefs from conversations."""

__version__ = "0.1.0"
