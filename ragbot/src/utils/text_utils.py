"""
RagBot - Text Utilities
========================
Helper functions for turning a raw corpus into embeddable lines.

These utilities are consumed primarily by the ``IngestionPipeline``
and should remain stateless and side-effect-free.
"""

from __future__ import annotations

import re
import unicodedata


# ── Non-printable character pattern ────────────────────────────────────
# Control characters (C0/C1) plus BOM, zero-width chars, soft hyphens
# and directional marks.  Tabs are left for whitespace stripping.
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\u200b\u200c\u200d\u200e\u200f\u00ad\u2060\ufffe]")


def clean_line(line: str) -> str:
    """
    Normalise a single corpus line for embedding.

    Steps:
        1. Unicode NFC normalisation.
        2. Strip non-printable / zero-width characters.
        3. Strip surrounding whitespace (including a stray ``\\r``).

    Inner whitespace is left untouched so the stored text matches the
    source line.
    """
    line = unicodedata.normalize("NFC", line)
    line = _NON_PRINTABLE_RE.sub("", line)
    return line.strip()


def split_corpus(raw_text: str) -> list[str]:
    """
    Split a raw corpus into one chunk per non-empty line.

    Examples::

        "A\\n\\nB\\n"        → ["A", "B"]
        "one\\r\\ntwo"       → ["one", "two"]
        "  \\n\\t\\n"         → []
    """
    lines = (clean_line(line) for line in raw_text.split("\n"))
    return [line for line in lines if line]
