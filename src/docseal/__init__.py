"""DocSeal: authenticated file-at-rest encryption for document storage."""

__version__ = "0.1.0"
