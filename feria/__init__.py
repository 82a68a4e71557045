"""Point-of-sale backend for beer fairs."""

__version__ = "1.0.0"
