"""DataRoom backend: hierarchical document rooms of folders and PDF files."""

__version__ = "0.1.0"
