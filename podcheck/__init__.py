"""Podcheck - delivery validation engine for logistics document bundles."""

__version__ = "1.0.0"
