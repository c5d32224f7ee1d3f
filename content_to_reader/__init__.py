"""content-to-reader: build EPUB digests from web pages."""

__version__ = "0.3.0"
