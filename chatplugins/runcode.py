"""Command parsing and output trimming for the online code runner."""

from __future__ import annotations

import re
from dataclasses import dataclass

_COMMAND = re.compile(r">runcode(raw)?\s(.+?)\s([\s\S]+)")

_CQ_ESCAPES = (
    ("&#91;", "["),
    ("&#93;", "]"),
    ("&#44;", ","),
    ("&amp;", "&"),
)

MAX_LINES = 30
MAX_CHARS = 1000
TRUNCATION_MARK = "\n............\n............"


@dataclass(frozen=True)
class RunRequest:
    """A parsed ``>runcode`` command."""

    raw: bool
    language: str
    block: str

    @property
    def wants_template(self) -> bool:
        """True when the user asked for the language's template."""
        return self.block == "help"


def _unescape_cq(text: str) -> str:
    for escaped, plain in _CQ_ESCAPES:
        text = text.replace(escaped, plain)
    return text


def parse_command(text: str) -> RunRequest | None:
    """Parse ``>runcode[raw] <language> <code>``; return None if it does not match."""
    match = _COMMAND.fullmatch(text)
    if match is None:
        return None
    raw, language, block = match.groups()
    return RunRequest(
        raw=raw is not None,
        language=language.lower(),
        block=_unescape_cq(block),
    )


def cut_too_long(text: str) -> str:
    """Truncate output longer than 30 lines or 1000 characters."""
    count = 0
    for i, ch in enumerate(text):
        if ch == "\r" and i < len(text) - 1 and text[i + 1] == "\n":
            pass  # a CRLF pair is counted once, at its LF
        elif ch in ("\n", "\r"):
            count += 1
        if count > MAX_LINES or i > MAX_CHARS:
            return text[: i - 1] + TRUNCATION_MARK
    return text