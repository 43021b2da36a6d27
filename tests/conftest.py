"""Shared fixtures: a fake HTTP session so no test touches the network."""

from __future__ import annotations

from typing import Dict, List, Union

import pytest
import requests


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Maps URL prefixes to responses or exceptions and records every call."""

    def __init__(self, routes: Dict[str, Union[FakeResponse, Exception]] = None):
        self.routes = routes or {}
        self.calls: List[str] = []
        self.headers = {}

    def get(self, url, timeout=None, **kwargs):
        self.calls.append(url)
        for prefix, outcome in self.routes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.exceptions.ConnectionError(f"No route for {url}")


SAMPLE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Sample Shop</title>
  <meta name="viewport" content="width=device-width">
  <meta name="description" content="A sample page">
  <meta property="og:title" content="Sample">
  <meta name="twitter:card" content="summary">
  <link rel="icon" href="/favicon.ico">
  <link rel="canonical" href="https://example.com/">
  <link rel="manifest" href="/manifest.json">
  <link rel="amphtml" href="https://example.com/amp">
  <script type="application/ld+json">{"@context": "https://schema.org"}</script>
</head>
<body>
  <h1>Welcome</h1>
  <img src="a.png" alt="A">
  <a href="/sitemap.xml">Sitemap</a> <a href="/robots.txt">Robots</a>
</body>
</html>
"""


@pytest.fixture
def sample_page() -> str:
    return SAMPLE_PAGE


@pytest.fixture
def fake_session():
    return FakeSession
