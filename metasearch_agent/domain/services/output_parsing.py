"""Parsers for the tagged blocks the rewrite prompt asks the model to emit.

The model answers with ``<question>...</question>`` and optionally
``<links>...</links>``. Anything malformed parses to an empty value; the
caller then behaves as if nothing was requested.
"""

from __future__ import annotations

import re

_BULLET = re.compile(r"^(\s*(-|\*|\d+\.\s|\d+\)\s|•)\s*)+")
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL)


def _tagged_block(text: str, key: str) -> str | None:
    start_tag, end_tag = f"<{key}>", f"</{key}>"
    start = text.find(start_tag)
    end = text.find(end_tag, start + len(start_tag)) if start != -1 else -1
    if start == -1 or end == -1:
        return None
    return text[start + len(start_tag) : end]


def parse_line(text: str, key: str = "question") -> str:
    """Return the single line inside ``<key>`` with list markers stripped, or ""."""
    block = _tagged_block(text, key)
    if block is None:
        return ""
    return _BULLET.sub("", block.strip()).strip()


def parse_line_list(text: str, key: str = "links") -> list[str]:
    """Return the non-empty lines inside ``<key>`` with list markers stripped."""
    block = _tagged_block(text, key)
    if block is None:
        return []
    lines = (_BULLET.sub("", line.strip()).strip() for line in block.splitlines())
    return [line for line in lines if line]


def strip_think_markup(text: str) -> str:
    """Remove reasoning-model ``<think>`` blocks from model output."""
    return _THINK_BLOCK.sub("", text).strip()
