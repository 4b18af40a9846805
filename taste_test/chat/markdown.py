"""
Display clean-up for completion text.

The model is asked for plain text but still answers with headers and
bullets now and then. This runs on every displayed entry at render time;
the transcript keeps the raw text.
"""

from __future__ import annotations

import re

HEADER_MARKER = re.compile(r"^#+(?:[ \t]+|$)", re.MULTILINE)
LEADING_BULLET = re.compile(r"\A-[ \t]+")
BULLET_LINE = re.compile(r"\n-[ \t]+")
EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_markdown(text: str) -> str:
    """
    Normalize one message for display.

    1. Strip "# " header markers at line starts ("#1" is left alone).
    2. Put a blank line before each "- " bullet and drop the marker.
    3. Collapse 3+ newlines to 2.
    4. Strip one trailing newline.

    >>> normalize_markdown("# Title\\n- item")
    'Title\\n\\nitem'
    """
    if not text:
        return ""

    cleaned = HEADER_MARKER.sub("", text)
    cleaned = LEADING_BULLET.sub("", cleaned)
    cleaned = BULLET_LINE.sub("\n\n", cleaned)
    cleaned = EXCESS_NEWLINES.sub("\n\n", cleaned)

    if cleaned.endswith("\n"):
        cleaned = cleaned[:-1]
    return cleaned
