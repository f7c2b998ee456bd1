"""Vector Studio: administer Chroma collections and search them by meaning."""

__version__ = "0.1.0"
