"""
Text decoding and line splitting for OMIE documents.

OMIE publishes its TXT files in ISO-8859-1 (Latin-1). Every byte maps to
exactly one code point, so decoding never fails and accented labels such
as "Energía" or "CARBÓN" come through intact.
"""

from __future__ import annotations

from pathlib import Path

__all__ = ["DOCUMENT_ENCODING", "FIELD_DELIMITER", "decode_document", "split_lines", "split_fields", "read_lines"]

DOCUMENT_ENCODING = "iso-8859-1"
FIELD_DELIMITER = ";"


def decode_document(content: bytes) -> str:
    """Decode raw document bytes to text."""
    return content.decode(DOCUMENT_ENCODING)


def split_lines(text: str) -> list[str]:
    """Split decoded text into lines, dropping line terminators."""
    return text.splitlines()


def split_fields(line: str) -> list[str]:
    """Split one document line on the field delimiter (fields are not trimmed)."""
    return line.split(FIELD_DELIMITER)


def read_lines(path: str | Path) -> list[str]:
    """Read a document saved on disk in its original encoding."""
    with open(path, "rb") as f:
        return split_lines(decode_document(f.read()))
