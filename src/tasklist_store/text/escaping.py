# src/tasklist_store/text/escaping.py

"""
Single-line escaping for Content fields.

Only four characters are escaped: TAB, CR, LF and backslash.
Everything else is stored verbatim (the files are UTF-8).
"""

from __future__ import annotations

from ..core.errors import InvalidEscapeError

_ESCAPES = {
    "\\": "\\\\",
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
}

_UNESCAPES = {
    "\\": "\\",
    "t": "\t",
    "r": "\r",
    "n": "\n",
}


def escape(text: str | None) -> str:
    if not text:
        return ""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def unescape(text: str | None) -> str:
    """
    Reverse escape().

    Raises InvalidEscapeError for any other backslash sequence,
    including a dangling backslash at the end of the value.
    """
    if not text:
        return ""
    if "\\" not in text:
        return text

    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        if i + 1 >= n:
            raise InvalidEscapeError(f"dangling escape at offset {i}")
        nxt = text[i + 1]
        repl = _UNESCAPES.get(nxt)
        if repl is None:
            raise InvalidEscapeError(f"invalid escape sequence \\{nxt} at offset {i}")
        out.append(repl)
        i += 2

    return "".join(out)
