"""Dreamscape: record a dream, watch it back as a generated video."""

__version__ = "0.1.0"
