import logging
import random
from typing import Optional

from bs4 import BeautifulSoup

from ..errors import InvalidInputError
from . import checks
from .findings import derive_findings
from .models import AnalysisInput, AnalysisReport, MetricResult

logger = logging.getLogger(__name__)


def extract_title(html: str) -> Optional[str]:
    if "<title" not in html.lower():
        return None
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        logger.debug("Could not parse markup for title extraction: %s", e)
        return None
    if soup.title and soup.title.string:
        return soup.title.string.strip() or None
    return None


class PageHeuristicAnalyzer:
    """
    Runs the fixed set of markup heuristics over already-fetched HTML.

    The analyzer performs no I/O and keeps no state between calls, so one
    instance can be shared by concurrent callers. The only non-deterministic
    field is the simulated page load time, used when the caller does not
    supply a measured one.
    """

    def __init__(self, config=None, rng: Optional[random.Random] = None):
        self.config = config if config else {}
        self.load_time_min = float(self.config.get("load_time_min", 0.5))
        self.load_time_max = float(self.config.get("load_time_max", 3.5))
        self.slow_load_threshold = float(self.config.get("slow_load_threshold", 2.0))
        self.rng = rng or random.Random()

    def simulate_load_time(self) -> float:
        # Placeholder for a real timing measurement. Quantized to the displayed
        # precision and kept below the upper bound of the half-open range.
        value = round(self.rng.uniform(self.load_time_min, self.load_time_max), 2)
        if self.load_time_max > self.load_time_min:
            value = min(value, round(self.load_time_max - 0.01, 2))
        return value

    def analyze(self, url: str, html: str, load_time: Optional[float] = None) -> AnalysisReport:
        if not isinstance(url, str):
            raise InvalidInputError(f"URL must be a string, got {type(url).__name__}")
        if not isinstance(html, str):
            raise InvalidInputError(f"HTML must be a string, got {type(html).__name__}")
        page = AnalysisInput(url=url, html=html)

        load_seconds = load_time if load_time is not None else self.simulate_load_time()
        # the metric and the Performance rule see the same rounded value
        load_seconds = round(load_seconds, 2)
        https = checks.uses_https(page.url)

        metrics = [
            MetricResult(checks.PAGE_LOAD_TIME, f"{load_seconds:.2f}s"),
            MetricResult(checks.PAGE_SIZE, f"{checks.page_size_kb(page.html):.2f} KB"),
            MetricResult(checks.IMAGES_COUNT, str(checks.count_images(page.html))),
        ]
        flags = {checks.HTTPS: https}
        for name, check in checks.PRESENCE_CHECKS:
            flags[name] = check(page.html)

        for name in checks.METRIC_ORDER[len(metrics):]:
            if name == checks.HTTPS:
                metrics.append(MetricResult(name, checks.yes_no_label(https)))
            else:
                metrics.append(MetricResult(name, checks.presence_label(flags[name])))

        findings = derive_findings(flags, load_seconds, self.slow_load_threshold)
        logger.debug("Analyzed %s: %d metrics, %d findings", page.url, len(metrics), len(findings))
        return AnalysisReport(
            url=page.url,
            metrics=metrics,
            findings=findings,
            page_title=extract_title(page.html),
        )


_default_analyzer = PageHeuristicAnalyzer()


def analyze(url: str, html: str, load_time: Optional[float] = None) -> AnalysisReport:
    """Analyze `html` fetched from `url` with the default thresholds."""
    return _default_analyzer.analyze(url, html, load_time=load_time)
