"""Security scanner for code added between two git revisions."""

__version__ = "0.1.0"
