"""Destination naming for converted documents."""

import uuid
from pathlib import PurePosixPath


def new_prefix() -> str:
    """Return a fresh random storage prefix (uuid4)."""
    return str(uuid.uuid4())


def base_name(source_key: str) -> str:
    """
    File name of ``source_key`` without directories and without its last extension.

    >>> base_name("reports/q3.final.docx")
    'q3.final'
    """
    name = PurePosixPath(source_key).name
    stem, dot, _ = name.rpartition(".")
    if not dot or not stem:
        return name
    return stem


def output_filename(source_key: str, target_format: str = "pdf") -> str:
    """Name of the converted document, e.g. ``a.docx`` -> ``a.pdf``."""
    return f"{base_name(source_key)}.{target_format}"
