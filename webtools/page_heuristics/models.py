from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Dict, Any, Optional

SEVERITIES = ("high", "medium", "low")


@dataclass(frozen=True)
class AnalysisInput:
    url: str
    html: str


@dataclass(frozen=True)
class MetricResult:
    metric: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Finding:
    type: str  # Security | Performance | Mobile | SEO | Social | Accessibility
    description: str
    severity: str  # high | medium | low

    def __post_init__(self):
        if self.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.severity}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisReport:
    url: str
    metrics: List[MetricResult] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)
    page_title: Optional[str] = None
    analyzed_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def value_of(self, metric: str) -> Optional[str]:
        for m in self.metrics:
            if m.metric == metric:
                return m.value
        return None

    def metric_names(self) -> List[str]:
        return [m.metric for m in self.metrics]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "analyzed_at": self.analyzed_at,
            "page_title": self.page_title,
            "metrics": [m.to_dict() for m in self.metrics],
            "findings": [f.to_dict() for f in self.findings],
        }
