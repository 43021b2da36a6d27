from __future__ import annotations

import csv

from .page_heuristics import AnalysisReport

METRIC_FIELDS = ['metric', 'value']
FINDING_FIELDS = ['type', 'severity', 'description']


def export_metrics_csv(path: str, report: AnalysisReport):
    with open(path, 'w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=METRIC_FIELDS)
        w.writeheader()
        for m in report.metrics:
            w.writerow({'metric': m.metric, 'value': m.value})


def export_findings_csv(path: str, report: AnalysisReport):
    # header is written even for a clean report
    with open(path, 'w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=FINDING_FIELDS)
        w.writeheader()
        for i in report.findings:
            w.writerow({'type': i.type, 'severity': i.severity, 'description': i.description})
