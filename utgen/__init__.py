"""Coverage-driven unit test generator."""

__version__ = "0.1.0"
