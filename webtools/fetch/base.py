# webtools/fetch/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0 Safari/537.36'


@dataclass(frozen=True)
class FetchResult:
    url: str
    html: str
    source: str  # endpoint that actually served the markup
    elapsed_seconds: float


class HtmlFetcher(ABC):
    """
    Capability interface for getting a page's HTML.

    Implementations decide how the markup is obtained (straight from the
    target host or through a relay) but always return text or raise
    `TransportError`.
    """

    default_retries = 2

    def __init__(self, config=None, session=None):
        self.fetcher_name = self.__class__.__name__
        self.config = config if config else {}
        self.global_config = self.config.get("Global", {})
        self.timeout = self.global_config.get("request_timeout", 10)

        default_ua = self.global_config.get("user_agent", DEFAULT_USER_AGENT)
        accept_lang = self.global_config.get("accept_language", "en-US,en;q=0.8")
        self.headers = {
            'User-Agent': default_ua,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': accept_lang,
        }

        if session is not None:
            self.session = session
        else:
            self.session = requests.Session()
            retries_total = int(self.config.get("http_retries_total", self.default_retries))
            backoff = float(self.global_config.get("http_backoff_factor", 0.2))
            status_forcelist = self.global_config.get("http_status_forcelist", [429, 500, 502, 503, 504])
            if retries_total > 0:
                retry_cfg = Retry(
                    total=retries_total,
                    connect=retries_total,
                    read=retries_total,
                    backoff_factor=backoff,
                    status_forcelist=status_forcelist,
                    allowed_methods={"GET", "HEAD"},
                    raise_on_status=False,
                )
                adapter = HTTPAdapter(max_retries=retry_cfg)
                self.session.mount('http://', adapter)
                self.session.mount('https://', adapter)
            self.session.headers.update(self.headers)

    @abstractmethod
    def fetch(self, url: str) -> FetchResult:
        """
        Fetches the HTML of `url`.

        Raises:
            TransportError: when no attempt produced a usable response.
        """
        pass

    def get_text(self, endpoint: str) -> tuple:
        """
        GETs `endpoint` and returns (text, elapsed_seconds).

        Raises requests.exceptions.RequestException on transport failure or a
        non-2xx status.
        """
        start = datetime.now()
        resp = self.session.get(endpoint, timeout=self.timeout)
        elapsed = (datetime.now() - start).total_seconds()
        resp.raise_for_status()
        logger.debug("%s fetched %s (%s) in %.3fs", self.fetcher_name, endpoint, resp.status_code, elapsed)
        return resp.text, elapsed
