"""Static site builder for a directory tree of markdown pages."""

__version__ = "0.3.0"
