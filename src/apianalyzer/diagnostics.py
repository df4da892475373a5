"""
Compiler-neutral diagnostic types.

Any static-analysis backend that reports a message, a rule code, a severity
and a source range can produce these.

apianalyzer/src/apianalyzer/diagnostics.py
"""

from dataclasses import dataclass

__all__ = ["Position", "Range", "Diagnostic"]


@dataclass(frozen=True)
class Position:
    """Zero-based line/character position in a source file."""

    line: int
    character: int

    def __str__(self) -> str:
        return f"{self.line}:{self.character}"


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


@dataclass(frozen=True)
class Diagnostic:
    """A single finding emitted by a compiler for the analyzed specification."""

    message: str
    code: str
    severity: str
    range: Range
