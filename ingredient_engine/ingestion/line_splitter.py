"""Split raw OCR text into candidate ingredient lines."""
import re
from dataclasses import dataclass
from typing import List, Optional

# Leading list bullets produced by OCR of formatted ingredient lists.
# A hyphen only counts as a bullet when followed by whitespace ("- 2 eggs"),
# never when it could be a sign or a range ("-2", "2-3").
BULLET_PATTERN = re.compile(r"^\s*(?:[•·▪●◦‣∙○■□►▶✓✔*]+|[-–—](?=\s))\s*")


@dataclass(frozen=True)
class CandidateLine:
    """One non-empty line of input.

    Attributes:
        text: Trimmed line used for parsing
        original: Line as written (untrimmed), used as the fallback name
        line_number: Zero-based position in the input, counting blank lines
    """

    text: str
    original: str
    line_number: int


def make_candidate(raw: str, line_number: int = 0, strip_bullets: bool = True) -> Optional[CandidateLine]:
    """Build a candidate from one raw line, or None if it is blank.

    A leading bullet is dropped from both the parsed text and the original.
    """
    original = raw.rstrip("\r\n")
    if strip_bullets:
        bullet = BULLET_PATTERN.match(original)
        if bullet:
            original = original[bullet.end():]

    trimmed = original.strip()
    if not trimmed:
        return None
    return CandidateLine(text=trimmed, original=original, line_number=line_number)


def split_lines(text: str, strip_bullets: bool = True) -> List[CandidateLine]:
    """Split text on line breaks and drop lines that are blank after trimming.

    Args:
        text: Raw multi-line text from OCR
        strip_bullets: Remove a leading list bullet before trimming

    Returns:
        Candidate lines in input order
    """
    candidates: List[CandidateLine] = []
    if not text:
        return candidates

    for line_number, raw in enumerate(text.splitlines()):
        candidate = make_candidate(raw, line_number, strip_bullets)
        if candidate is not None:
            candidates.append(candidate)

    return candidates
