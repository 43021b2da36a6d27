import logging

import requests

from ..errors import TransportError
from .base import HtmlFetcher, FetchResult

logger = logging.getLogger(__name__)


class DirectFetcher(HtmlFetcher):
    """Fetches the target URL straight from its host."""

    def fetch(self, url: str) -> FetchResult:
        try:
            html, elapsed = self.get_text(url)
        except requests.exceptions.RequestException as e:
            logger.warning("Direct fetch of %s failed: %s", url, e)
            raise TransportError(url, [(url, str(e))]) from e
        return FetchResult(url=url, html=html, source=url, elapsed_seconds=elapsed)
