"""AI-assisted code commenting for modified source files."""

__version__ = "1.0.0"
