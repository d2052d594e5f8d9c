"""Uncertainty-aware elite and provenance rankings for historical artisans."""

__version__ = "0.1.0"
