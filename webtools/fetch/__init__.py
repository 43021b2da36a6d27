"""Fetch layer.

`HtmlFetcher` is the capability interface; `DirectFetcher` and
`ProxyFetcher` are the two interchangeable ways of obtaining markup.
"""

from .base import HtmlFetcher, FetchResult
from .direct import DirectFetcher
from .proxy import ProxyFetcher, build_proxy_url

FETCHERS = {
    "direct": DirectFetcher,
    "proxy": ProxyFetcher,
}


def build_fetcher(app_config: dict, mode: str = None, session=None) -> HtmlFetcher:
    """Instantiate the fetcher named by `mode` or by the Fetcher config section."""
    fetch_cfg = dict(app_config.get("Fetcher", {}))
    fetch_cfg["Global"] = app_config.get("Global", {})
    mode = mode or fetch_cfg.get("mode", "proxy")
    try:
        fetcher_cls = FETCHERS[mode]
    except KeyError:
        raise ValueError(f"Unknown fetch mode: {mode}") from None
    return fetcher_cls(config=fetch_cfg, session=session)
