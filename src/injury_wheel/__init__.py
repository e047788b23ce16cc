"""Leafs injury wheel: spin, resolve a timeline, generate the injury report."""

__version__ = "0.1.0"
