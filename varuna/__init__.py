"""Varuna - cloud provider status feed monitor."""

__version__ = "1.0.0"
