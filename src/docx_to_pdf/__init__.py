"""Batch conversion of documents in S3 to PDF."""

__version__ = "0.1.0"
