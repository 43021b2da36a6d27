from collections import Counter

from .page_heuristics import AnalysisReport
from .page_heuristics.checks import PRESENCE_CHECKS, HTTPS

PASSING_VALUES = ("Present", "Yes")
BOOLEAN_METRICS = tuple(name for name, _ in PRESENCE_CHECKS) + (HTTPS,)


def summarize_report(report: AnalysisReport) -> dict:
    """Counts passing boolean checks and tallies findings by severity and type."""
    checked = [m for m in report.metrics if m.metric in BOOLEAN_METRICS]
    passed = sum(1 for m in checked if m.value in PASSING_VALUES)
    total = len(checked)
    severity_counts = Counter(f.severity for f in report.findings)
    return {
        "passed_checks": passed,
        "total_checks": total,
        "pass_percent": round(passed / total * 100, 1) if total else 0,
        "findings_by_severity": {s: severity_counts.get(s, 0) for s in ("high", "medium", "low")},
        "findings_by_type": dict(Counter(f.type for f in report.findings)),
    }
