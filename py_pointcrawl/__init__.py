"""Fantasy pointcrawl map generator."""

__version__ = "0.1.0"
