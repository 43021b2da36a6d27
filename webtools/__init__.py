"""WebTools page analyzer package.

Fetches a page (directly or through relay proxies) and runs a fixed set of
markup heuristics over it.
"""

from .errors import WebToolsError, InvalidInputError, TransportError
from .page_heuristics import PageHeuristicAnalyzer, analyze
