"""nippo: front-matter reconciliation for remote journal documents."""

__version__ = "1.0.0"
