"""
Text normalization helpers.

Whitespace collapsing, markup stripping, target-script restriction and
overlapping chunking. Pure functions, no I/O.

Dependencies: re (stdlib)
System role: Text cleanup shared by retrieval, embeddings and answer sanitizing
"""

import re
from collections.abc import Iterator

_WHITESPACE_RE = re.compile(r"\s+")
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")

# Hebrew block, digits, space, newline and a fixed punctuation set.
_OUTSIDE_TARGET_RE = re.compile(r"[^֐-׿0-9 .,;:!?()\[\]{}\"'׳״/\-\n]+")
_TARGET_LETTER_RE = re.compile(r"[א-ת]")
_DIGIT_RE = re.compile(r"\d")

DEFAULT_CHUNK_SIZE = 700
DEFAULT_CHUNK_OVERLAP = 80


def normalize_whitespace(text: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim both ends."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_markup(html: str | None) -> str:
    """
    Remove markup from an HTML fragment.

    Style and script blocks are dropped together with their content, then
    every remaining tag is replaced by a space.

    Args:
        html: HTML or plain text

    Returns:
        str: Plain text with normalized whitespace
    """
    if not html:
        return ""
    text = _STYLE_RE.sub(" ", html)
    text = _SCRIPT_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    return normalize_whitespace(text)


def restrict_to_target_script(text: str | None) -> str:
    """
    Delete every run of characters outside the Hebrew allow-list.

    Destructive: meant for model output and transient prompt context only,
    never for stored source records.
    """
    if not text:
        return ""
    return normalize_whitespace(_OUTSIDE_TARGET_RE.sub(" ", text))


def has_target_script(text: str | None) -> bool:
    """Check whether text contains at least one Hebrew letter."""
    return bool(text) and _TARGET_LETTER_RE.search(text) is not None


def has_digit(text: str | None) -> bool:
    """Check whether text contains at least one digit."""
    return bool(text) and _DIGIT_RE.search(text) is not None


class ChunkSequence:
    """
    Lazy, restartable sequence of overlapping text windows.

    Each iteration walks the text again from the start, so the same
    instance can be consumed more than once.
    """

    def __init__(self, text: str, size: int, overlap: int) -> None:
        if size <= 0:
            raise ValueError("chunk size must be positive")
        if overlap < 0 or overlap >= size:
            raise ValueError("chunk overlap must be in [0, size)")
        self._text = text
        self._size = size
        self._step = size - overlap

    def __iter__(self) -> Iterator[str]:
        text = self._text
        if not text:
            return
        start = 0
        while start < len(text):
            end = min(len(text), start + self._size)
            yield text[start:end]
            if end == len(text):
                return
            start += self._step

    def __len__(self) -> int:
        if not self._text:
            return 0
        if len(self._text) <= self._size:
            return 1
        remaining = len(self._text) - self._size
        return 1 + -(-remaining // self._step)


def chunk_text(
    text: str | None,
    size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> ChunkSequence:
    """
    Split whitespace-normalized text into overlapping chunks.

    Args:
        text: Source text
        size: Maximum characters per chunk
        overlap: Characters shared by consecutive chunks

    Returns:
        ChunkSequence: Empty for empty input, a single chunk when the text fits

    Raises:
        ValueError: If size is not positive or overlap is outside [0, size)
    """
    return ChunkSequence(normalize_whitespace(text), size, overlap)
