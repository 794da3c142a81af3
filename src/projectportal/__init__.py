"""Student project submission portal."""

__version__ = "1.0.0"
