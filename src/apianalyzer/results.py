"""
Uniform analysis results uploaded to the registry.

apianalyzer/src/apianalyzer/results.py
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .diagnostics import Diagnostic

__all__ = ["UniformAnalysisResult", "to_uniform_results", "DEFAULT_ANALYZER"]

DEFAULT_ANALYZER = "typespec"


@dataclass(frozen=True)
class UniformAnalysisResult:
    """Vendor-neutral form of one compiler diagnostic."""

    analyzer: str
    description: str
    analyzer_rule_name: str
    severity: str
    range_start: str
    range_end: str
    doc_url: Optional[str] = None

    @classmethod
    def from_diagnostic(
        cls, diagnostic: Diagnostic, analyzer: str = DEFAULT_ANALYZER
    ) -> "UniformAnalysisResult":
        start = diagnostic.range.start
        end = diagnostic.range.end
        return cls(
            analyzer=analyzer,
            description=diagnostic.message,
            analyzer_rule_name=diagnostic.code,
            severity=diagnostic.severity,
            range_start=str(start),
            range_end=str(end),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to the registry's JSON shape."""
        return {
            "analyzer": self.analyzer,
            "description": self.description,
            "analyzerRuleName": self.analyzer_rule_name,
            "severity": self.severity,
            "docUrl": self.doc_url,
            "details": {
                "range": {
                    "start": self.range_start,
                    "end": self.range_end,
                }
            },
        }


def to_uniform_results(
    diagnostics: Iterable[Diagnostic], analyzer: str = DEFAULT_ANALYZER
) -> List[UniformAnalysisResult]:
    """Map diagnostics 1:1 to uniform results, preserving order."""
    return [UniformAnalysisResult.from_diagnostic(d, analyzer) for d in diagnostics]
