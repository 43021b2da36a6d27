# webtools/pipeline.py
import logging
from urllib.parse import urlparse

from .errors import InvalidInputError, TransportError
from .events import EventChannel, ResultReady
from .fetch import HtmlFetcher
from .page_heuristics import PageHeuristicAnalyzer, AnalysisReport

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(('http://', 'https://')):
        return 'http://' + url
    return url


def is_valid_url(url) -> bool:
    if not isinstance(url, str) or not url.strip():
        return False
    if '://' in url and not url.strip().startswith(('http://', 'https://')):
        return False
    try:
        result = urlparse(normalize_url(url))
        return all([result.scheme in ('http', 'https'), result.netloc]) and ' ' not in result.netloc
    except ValueError:
        return False


def validate_url(url) -> str:
    """Returns the normalized URL or raises InvalidInputError."""
    if not is_valid_url(url):
        raise InvalidInputError(f"Invalid URL provided: {url}")
    return normalize_url(url)


class AnalysisPipeline:
    """
    Fetch-then-analyze runner.

    The fetcher is swappable (direct or relay); progress and the final report
    are published on `channel` for whoever subscribed.
    """

    def __init__(self, fetcher: HtmlFetcher, channel: EventChannel = None, config=None, analyzer=None):
        self.fetcher = fetcher
        self.channel = channel or EventChannel()
        self.config = config if config else {}
        analyzer_cfg = self.config.get("PageHeuristicAnalyzer", {})
        self.analyzer = analyzer or PageHeuristicAnalyzer(config=analyzer_cfg)
        self.load_time_source = analyzer_cfg.get("load_time_source", "measured")

    def run(self, url: str) -> AnalysisReport:
        target = validate_url(url)
        self.channel.log(f"Fetching {target} via {self.fetcher.fetcher_name}", url=target)
        try:
            fetched = self.fetcher.fetch(target)
        except TransportError as e:
            self.channel.log(f"Failed to fetch {target}: {e}", level="error", url=target)
            raise
        self.channel.log(f"Fetched {len(fetched.html.encode('utf-8'))} bytes from {fetched.source}", url=target)

        load_time = fetched.elapsed_seconds if self.load_time_source == "measured" else None
        self.channel.log("Analyzing page markup", url=target)
        report = self.analyzer.analyze(target, fetched.html, load_time=load_time)
        self.channel.log(f"Analysis complete: {len(report.findings)} issue(s) found", url=target)
        logger.info("Analysis of %s finished with %d findings", target, len(report.findings))

        self.channel.publish(ResultReady(url=target, report=report))
        return report
