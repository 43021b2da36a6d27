"""Tests for the markup heuristics and derived findings."""

import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from webtools.errors import InvalidInputError
from webtools.page_heuristics import PageHeuristicAnalyzer, analyze, METRIC_ORDER


def _findings(report):
    return [(f.type, f.severity, f.description) for f in report.findings]


class TestMetrics:
    def test_metric_order_is_fixed(self, sample_page):
        first = analyze("https://example.com", sample_page)
        second = analyze("http://other.example", "")
        assert first.metric_names() == list(METRIC_ORDER)
        assert second.metric_names() == list(METRIC_ORDER)
        assert len(first.metrics) == 19
        assert len(set(first.metric_names())) == 19

    def test_empty_html(self):
        report = analyze("https://example.com", "")
        assert report.value_of("Page Size") == "0.00 KB"
        assert report.value_of("Images Count") == "0"
        assert report.value_of("HTTPS") == "Yes"
        # no images at all, so the alt check passes vacuously
        assert report.value_of("Image Alt Tags") == "Present"
        for name in METRIC_ORDER[3:]:
            if name in ("HTTPS", "Image Alt Tags"):
                continue
            assert report.value_of(name) == "Missing", name

    def test_empty_html_over_http(self):
        report = analyze("http://example.com", "")
        assert report.value_of("HTTPS") == "No"

    def test_fully_featured_page(self, sample_page):
        report = analyze("https://example.com", sample_page, load_time=0.8)
        for name in METRIC_ORDER[3:]:
            expected = "Yes" if name == "HTTPS" else "Present"
            assert report.value_of(name) == expected, name
        assert report.value_of("Images Count") == "1"
        assert report.value_of("Page Load Time") == "0.80s"
        assert report.findings == []
        assert report.page_title == "Sample Shop"

    @pytest.mark.parametrize("html,expected", [
        ("<h1>Title</h1>", "Present"),
        ('<h1 class="big">Title</h1>', "Present"),
        ("<h2>Sub</h2>", "Missing"),
        ("", "Missing"),
    ])
    def test_h1_detection(self, html, expected):
        assert analyze("https://example.com", html).value_of("H1 Tag") == expected

    def test_page_size_counts_utf8_bytes(self):
        html = "é" * 1024  # two bytes each
        assert analyze("https://example.com", html).value_of("Page Size") == "2.00 KB"

    def test_images_counted_literally(self):
        html = '<img src="a.png"><img src="b.png" alt="b"><IMG src="c.png">'
        report = analyze("https://example.com", html)
        assert report.value_of("Images Count") == "2"

    def test_favicon_shortcut_icon(self):
        report = analyze("https://example.com", '<link rel="shortcut icon" href="/f.ico">')
        assert report.value_of("Favicon") == "Present"

    def test_non_string_html_rejected(self):
        with pytest.raises(InvalidInputError):
            analyze("https://example.com", None)

    def test_non_string_url_rejected(self):
        with pytest.raises(InvalidInputError):
            analyze(None, "")


class TestFindings:
    def test_plain_http_page(self):
        report = analyze("http://example.com", "<html><body>hi</body></html>", load_time=1.0)
        assert report.value_of("HTTPS") == "No"
        assert report.value_of("H1 Tag") == "Missing"
        for name in ("Schema Markup", "Structured Data", "Open Graph Tags", "Twitter Cards",
                     "AMP Version", "Web App Manifest"):
            assert report.value_of(name) == "Missing"
        assert report.value_of("Image Alt Tags") == "Present"
        found = _findings(report)
        assert ("Security", "high", "Website is not using HTTPS") in found
        assert ("SEO", "medium", "Missing H1 tag") in found

    def test_findings_order(self):
        report = analyze("http://example.com", '<img src="x.png">', load_time=3.0)
        assert [f.type for f in report.findings] == [
            "Security", "Performance", "Mobile", "SEO", "SEO", "SEO",
            "Social", "Accessibility", "Accessibility",
        ]

    def test_image_without_alt(self):
        report = analyze("https://example.com", '<img src="x.png">', load_time=1.0)
        assert report.value_of("Image Alt Tags") == "Missing"
        assert ("Accessibility", "high", "Images missing alt text") in _findings(report)

    def test_lang_attribute_suppresses_finding(self):
        report = analyze("https://example.com", '<html lang="en"><body></body></html>', load_time=1.0)
        assert report.value_of("HTML Lang Attribute") == "Present"
        assert ("Accessibility", "medium", "Missing HTML lang attribute") not in _findings(report)

    def test_slow_load_threshold(self):
        slow = analyze("https://example.com", "", load_time=2.5)
        fast = analyze("https://example.com", "", load_time=2.0)
        assert ("Performance", "high", "Page load time is above 2 seconds") in _findings(slow)
        assert all(f.type != "Performance" for f in fast.findings)

    def test_rounded_load_time_matches_finding(self):
        report = analyze("https://example.com", "", load_time=2.004)
        assert report.value_of("Page Load Time") == "2.00s"
        assert all(f.type != "Performance" for f in report.findings)

    def test_custom_threshold(self):
        analyzer = PageHeuristicAnalyzer(config={"slow_load_threshold": 1.5})
        report = analyzer.analyze("https://example.com", "", load_time=1.6)
        assert ("Performance", "high", "Page load time is above 1.5 seconds") in _findings(report)


class TestLoadTimeSimulation:
    def test_simulated_value_in_range(self):
        analyzer = PageHeuristicAnalyzer(rng=random.Random(7))
        for _ in range(50):
            value = analyzer.analyze("https://example.com", "").value_of("Page Load Time")
            seconds = float(value.rstrip("s"))
            assert 0.5 <= seconds < 3.5

    def test_idempotent_apart_from_load_time(self, sample_page):
        a = analyze("https://example.com", sample_page, load_time=1.0)
        b = analyze("https://example.com", sample_page, load_time=1.0)
        assert a.metrics == b.metrics
        assert a.findings == b.findings

    def test_seeded_rng_is_deterministic(self):
        one = PageHeuristicAnalyzer(rng=random.Random(3)).analyze("https://example.com", "")
        two = PageHeuristicAnalyzer(rng=random.Random(3)).analyze("https://example.com", "")
        assert one.value_of("Page Load Time") == two.value_of("Page Load Time")

    def test_simulated_value_stays_below_upper_bound(self):
        class EdgeRandom:
            def uniform(self, a, b):
                return 3.499

        report = PageHeuristicAnalyzer(rng=EdgeRandom()).analyze("https://example.com", "")
        assert report.value_of("Page Load Time") == "3.49s"


def test_concurrent_calls_agree(sample_page):
    def run(_):
        report = analyze("https://example.com", sample_page, load_time=1.25)
        return report.metrics, report.findings

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(run, range(32)))
    first_metrics, first_findings = results[0]
    for metrics, findings in results[1:]:
        assert metrics == first_metrics
        assert findings == first_findings
