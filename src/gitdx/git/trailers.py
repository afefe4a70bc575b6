"""Commit message trailer parsing and editing.

A trailer block is the last paragraph of a message, provided it is not the
subject paragraph and every line in it is either ``Key<sep> value`` or an
indented continuation of the previous value. This is stricter than
``git interpret-trailers``, which tolerates some non-trailer lines in the
block; messages written by git-dx always satisfy the strict form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*$")

DEFAULT_SEPARATORS = ":"


@dataclass(frozen=True, slots=True)
class _Trailer:
    key: str
    value: str
    lines: tuple[str, ...]


def _split_message(message: str) -> tuple[list[str], list[str]]:
    """Split into (head lines, last paragraph lines). Head is empty for single paragraphs."""
    lines = message.strip("\n").rstrip().splitlines()
    for i in range(len(lines) - 1, -1, -1):
        if not lines[i].strip():
            head = lines[:i]
            while head and not head[-1].strip():
                head.pop()
            return head, lines[i + 1 :]
    return lines, []


def _parse_line(line: str, separators: str) -> tuple[str, str] | None:
    positions = [i for i in (line.find(sep) for sep in separators) if i > 0]
    if not positions:
        return None
    i = min(positions)
    key = line[:i].rstrip()
    if not _KEY_RE.match(key):
        return None
    return key, line[i + 1 :].strip()


def _parse_block(block: list[str], separators: str) -> list[_Trailer] | None:
    """Parse a paragraph as trailers, or return None if it is not a trailer block."""
    trailers: list[_Trailer] = []
    for line in block:
        if line[:1].isspace():
            if not trailers:
                return None
            prev = trailers[-1]
            trailers[-1] = _Trailer(
                prev.key, f"{prev.value} {line.strip()}".strip(), (*prev.lines, line)
            )
            continue
        parsed = _parse_line(line, separators)
        if parsed is None:
            return None
        trailers.append(_Trailer(parsed[0], parsed[1], (line,)))
    return trailers or None


def _locate(message: str, separators: str) -> tuple[list[str], list[_Trailer]]:
    head, block = _split_message(message)
    if not head or not block:
        return (head or block), []
    trailers = _parse_block(block, separators)
    if trailers is None:
        return [*head, "", *block], []
    return head, trailers


def _join(head: list[str], trailer_lines: list[str]) -> str:
    parts = ["\n".join(head)] if head else []
    if trailer_lines:
        parts.append("\n".join(trailer_lines))
    return "\n\n".join(parts) + "\n"


def parse_trailers(message: str, separators: str = DEFAULT_SEPARATORS) -> list[tuple[str, str]]:
    """Return the ordered (key, value) pairs of the message's trailer block."""
    _, trailers = _locate(message, separators)
    return [(t.key, t.value) for t in trailers]


def trailer_block_lines(message: str) -> list[str]:
    """Raw lines of the last paragraph, whether or not it parses as trailers."""
    head, block = _split_message(message)
    return block if head else []


def strip_trailer(message: str, key: str, separators: str = DEFAULT_SEPARATORS) -> str:
    """Remove every trailer whose key matches ``key`` (case-insensitive)."""
    head, trailers = _locate(message, separators)
    if not trailers:
        return message
    kept = [line for t in trailers if t.key.lower() != key.lower() for line in t.lines]
    return _join(head, kept)


def set_trailer(
    message: str,
    key: str,
    value: str,
    separators: str = DEFAULT_SEPARATORS,
) -> str:
    """Replace any ``key`` trailers with a single ``key<sep> value`` at the end of the block.

    ``<sep>`` is the first configured separator, so the result parses back
    under the same separators.
    """
    head, trailers = _locate(message, separators)
    kept = [line for t in trailers if t.key.lower() != key.lower() for line in t.lines]
    return _join(head, [*kept, f"{key}{separators[0]} {value}"])
