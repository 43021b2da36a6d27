from __future__ import annotations

from typing import Dict, List

from .checks import (
    HTTPS, MOBILE_VIEWPORT, META_DESCRIPTION, H1_TAG, SCHEMA_MARKUP,
    OPEN_GRAPH_TAGS, IMAGE_ALT_TAGS, HTML_LANG_ATTRIBUTE,
)
from .models import Finding


def derive_findings(flags: Dict[str, bool], load_time_seconds: float, slow_load_threshold: float = 2.0) -> List[Finding]:
    """
    Turn check outcomes into findings.

    Rules are independent of each other and always evaluated in the same
    order, so a page can produce several findings of the same type.
    """
    findings: List[Finding] = []

    if not flags.get(HTTPS):
        findings.append(Finding('Security', 'Website is not using HTTPS', 'high'))
    if load_time_seconds > slow_load_threshold:
        findings.append(Finding('Performance', f'Page load time is above {slow_load_threshold:g} seconds', 'high'))
    if not flags.get(MOBILE_VIEWPORT):
        findings.append(Finding('Mobile', 'Missing viewport meta tag for mobile optimization', 'high'))
    if not flags.get(META_DESCRIPTION):
        findings.append(Finding('SEO', 'Missing meta description', 'medium'))
    if not flags.get(H1_TAG):
        findings.append(Finding('SEO', 'Missing H1 tag', 'medium'))
    if not flags.get(SCHEMA_MARKUP):
        findings.append(Finding('SEO', 'Missing Schema markup', 'medium'))
    if not flags.get(OPEN_GRAPH_TAGS):
        findings.append(Finding('Social', 'Missing Open Graph tags', 'medium'))
    if not flags.get(IMAGE_ALT_TAGS):
        findings.append(Finding('Accessibility', 'Images missing alt text', 'high'))
    if not flags.get(HTML_LANG_ATTRIBUTE):
        findings.append(Finding('Accessibility', 'Missing HTML lang attribute', 'medium'))

    return findings
