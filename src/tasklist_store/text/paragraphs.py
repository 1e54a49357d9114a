# src/tasklist_store/text/paragraphs.py

"""
Structural parsing shared by task files and the attachment ledger.

- split_paragraphs: raw file text -> blank-line-delimited paragraphs (LF-joined)
- parse_fields: one paragraph -> ordered {key: raw value}
"""

from __future__ import annotations

_BOM = "\ufeff"


def split_lines(text: str) -> list[str]:
    """Split on LF and drop one trailing CR per line (CRLF and LF files read the same)."""
    if text.startswith(_BOM):
        text = text[1:]
    lines = text.split("\n")
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def split_paragraphs(text: str | None) -> list[str]:
    if not text:
        return []

    paragraphs: list[str] = []
    current: list[str] = []
    for line in split_lines(text):
        if line.strip():
            current.append(line)
            continue
        if current:
            paragraphs.append("\n".join(current))
            current = []

    if current:
        paragraphs.append("\n".join(current))
    return paragraphs


def parse_field_line(line: str) -> tuple[str, str] | None:
    """Return (key, value) or None when the line has no usable separator."""
    idx = line.find(":")
    if idx <= 0:
        return None
    return line[:idx], line[idx + 1:]


def parse_fields(paragraph: str | None) -> dict[str, str]:
    fields: dict[str, str] = {}
    if not paragraph:
        return fields
    for line in paragraph.split("\n"):
        kv = parse_field_line(line)
        if kv is None:
            continue
        key, value = kv
        fields[key] = value
    return fields
