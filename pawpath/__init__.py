"""PawPath: dog-walking route planning service."""

__version__ = "1.0.0"
