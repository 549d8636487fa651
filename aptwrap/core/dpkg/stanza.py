"""
Parser for the "Key: value" stanza format printed by ``dpkg -s``.

Example input::

    Package: redis-server
    Status: install ok installed
    Description: Persistent key-value database
     Redis is a key-value database in a similar vein to memcache
     .
     This package depends on the redis-tools package.

Continuation lines (leading space) are appended to the current field with
their surrounding whitespace stripped and no separator added. A continuation
line consisting of a single "." is a paragraph break and becomes "\\n\\n".
"""

from __future__ import annotations

PARAGRAPH_BREAK = " ."


def parse_stanza(output: str | bytes | None) -> dict[str, str]:
    """
    Parse dpkg stanza text into a field mapping.

    Never fails on malformed input: a line without a colon becomes a key with
    an empty value, and blank or empty input yields an empty dict. Repeated
    keys keep the last value seen.
    """
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    output = output or ""
    if not output.strip():
        return {}

    parsed: dict[str, str] = {}
    current_key: str | None = None
    current_value = ""

    for line in output.split("\n"):
        if not line.startswith(" "):
            if current_key:
                parsed[current_key] = current_value

            key, _, value = line.partition(":")
            current_key = key
            current_value = value.strip()
        elif line == PARAGRAPH_BREAK:
            current_value += "\n\n"
        else:
            current_value += line.strip()

    if current_key:
        parsed[current_key] = current_value

    return parsed
