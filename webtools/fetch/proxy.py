import logging
from typing import List
from urllib.parse import quote

import requests

from ..errors import TransportError
from .base import HtmlFetcher, FetchResult

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_PROXY = "https://api.allorigins.win/raw?url={url}"
DEFAULT_BACKUP_PROXY = "https://corsproxy.io/?url={url}"


def build_proxy_url(template: str, target_url: str) -> str:
    encoded = quote(target_url, safe="")
    if "{url}" in template:
        return template.replace("{url}", encoded)
    return template + encoded


class ProxyFetcher(HtmlFetcher):
    """
    Fetches pages through public relay proxies.

    The primary relay is tried first; any transport error or non-2xx status
    moves on to the backup relay. There is no retry loop beyond that single
    fallback, so relay sessions default to zero adapter retries.
    """

    default_retries = 0

    def __init__(self, config=None, session=None):
        super().__init__(config=config, session=session)
        self.primary_proxy = self.config.get("primary_proxy", DEFAULT_PRIMARY_PROXY)
        self.backup_proxy = self.config.get("backup_proxy", DEFAULT_BACKUP_PROXY)

    @property
    def proxy_templates(self) -> List[str]:
        return [t for t in (self.primary_proxy, self.backup_proxy) if t]

    def fetch(self, url: str) -> FetchResult:
        attempts = []
        for template in self.proxy_templates:
            endpoint = build_proxy_url(template, url)
            try:
                html, elapsed = self.get_text(endpoint)
            except requests.exceptions.RequestException as e:
                logger.warning("Relay %s failed for %s: %s", template, url, e)
                attempts.append((template, str(e)))
                continue
            return FetchResult(url=url, html=html, source=template, elapsed_seconds=elapsed)
        raise TransportError(url, attempts)
