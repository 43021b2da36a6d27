"""Page heuristic analysis package.

Provides `PageHeuristicAnalyzer` and the `analyze` shortcut, which turn a URL
and its raw HTML into an ordered metric list plus derived findings.
"""

from .analyzer import PageHeuristicAnalyzer, analyze
from .models import AnalysisInput, AnalysisReport, Finding, MetricResult
from .checks import METRIC_ORDER
