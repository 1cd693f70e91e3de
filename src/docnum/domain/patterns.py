"""Document number pattern compiler.

A pattern such as ``QT-YYYY-XXXX`` is made of literal text, date tokens
(``YYYY``, ``YY``, ``MM``, ``DD``) and exactly one run of ``X`` characters
holding the zero-padded running number.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from docnum.domain.errors import InvalidPatternError

# Longest match first: YYYY must win over YY
DATE_TOKENS: dict[str, int] = {"YYYY": 4, "YY": 2, "MM": 2, "DD": 2}

LITERAL = "literal"
RUN = "run"


@dataclass(frozen=True)
class Segment:
    """One piece of a parsed pattern."""

    kind: str
    text: str

    @property
    def width(self) -> int:
        return len(self.text)


def _tokenize(pattern: str) -> list[Segment]:
    segments: list[Segment] = []
    literal = ""
    i = 0
    while i < len(pattern):
        token = next((t for t in DATE_TOKENS if pattern.startswith(t, i)), None)
        if token is None and pattern[i] == "X":
            end = i
            while end < len(pattern) and pattern[end] == "X":
                end += 1
            token = pattern[i:end]
        if token is None:
            literal += pattern[i]
            i += 1
            continue
        if literal:
            segments.append(Segment(LITERAL, literal))
            literal = ""
        segments.append(Segment(RUN if token[0] == "X" else token, token))
        i += len(token)
    if literal:
        segments.append(Segment(LITERAL, literal))
    return segments


def _date_value(token: str, as_of: date) -> str:
    if token == "YYYY":
        return f"{as_of.year:04d}"
    if token == "YY":
        return f"{as_of.year % 100:02d}"
    if token == "MM":
        return f"{as_of.month:02d}"
    return f"{as_of.day:02d}"


class CompiledPattern:
    """Parsed pattern able to render numbers and recover them again."""

    def __init__(self, pattern: str, segments: list[Segment]):
        self.pattern = pattern
        self.segments = segments
        self.run_width = next(s.width for s in segments if s.kind == RUN)
        self.date_tokens = [s.kind for s in segments if s.kind in DATE_TOKENS]
        self.matcher = re.compile(self._regex(None))

    def __repr__(self) -> str:
        return f"CompiledPattern({self.pattern!r})"

    @property
    def has_date_tokens(self) -> bool:
        return bool(self.date_tokens)

    def _regex(self, as_of: Optional[date]) -> str:
        parts = ["^"]
        for segment in self.segments:
            if segment.kind == LITERAL:
                parts.append(re.escape(segment.text))
            elif segment.kind == RUN:
                parts.append(rf"(\d{{{segment.width}}})")
            elif as_of is None:
                parts.append(rf"\d{{{DATE_TOKENS[segment.kind]}}}")
            else:
                parts.append(re.escape(_date_value(segment.kind, as_of)))
        parts.append("$")
        return "".join(parts)

    def period_matcher(self, as_of: date) -> re.Pattern:
        """Matcher with date tokens fixed to the values for ``as_of``.

        Numbers issued in another year or month do not match, which is what
        restarts the running number when the period changes.
        """
        return re.compile(self._regex(as_of))

    def period_key(self, as_of: date) -> str:
        """Rendered date tokens for ``as_of``, empty when the pattern has none."""
        return "-".join(_date_value(token, as_of) for token in self.date_tokens)

    def render(self, number: int, as_of: date) -> str:
        """Render a document number.

        Numbers wider than the X run keep all their digits.
        """
        parts = []
        for segment in self.segments:
            if segment.kind == LITERAL:
                parts.append(segment.text)
            elif segment.kind == RUN:
                parts.append(f"{number:0{segment.width}d}")
            else:
                parts.append(_date_value(segment.kind, as_of))
        return "".join(parts)

    def parse(self, document_number: str, as_of: Optional[date] = None) -> Optional[int]:
        """Return the running number embedded in ``document_number``.

        With ``as_of`` only numbers from that period are recognised.
        """
        matcher = self.matcher if as_of is None else self.period_matcher(as_of)
        match = matcher.match(document_number)
        if match is None:
            return None
        return int(match.group(1))


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a pattern string.

    Raises:
        InvalidPatternError: If the pattern is empty or does not contain
            exactly one run of X characters
    """
    if pattern is None or not pattern.strip():
        raise InvalidPatternError("Pattern must not be empty")
    pattern = pattern.strip()
    segments = _tokenize(pattern)
    runs = [s for s in segments if s.kind == RUN]
    if not runs:
        raise InvalidPatternError(
            f"Pattern '{pattern}' has no running number (add a run of X, e.g. XXXX)"
        )
    if len(runs) > 1:
        raise InvalidPatternError(
            f"Pattern '{pattern}' has {len(runs)} runs of X, exactly one is allowed"
        )
    return CompiledPattern(pattern, segments)


def validate_pattern(pattern: str) -> str:
    """Validate a pattern for configuration and return it stripped."""
    return compile_pattern(pattern).pattern
