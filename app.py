# app.py
import argparse
import copy
import json
import logging
import os
import queue
import threading
from datetime import datetime
from urllib.parse import urlparse

# Import Flask for API (conditionally, then check run mode)
try:
    from flask import Flask, Response, request, jsonify
except ImportError:
    Flask = None # Will prevent API mode if Flask not installed

from webtools.errors import InvalidInputError, TransportError
from webtools.events import EventChannel, ProgressLog, ResultReady
from webtools.export import export_metrics_csv, export_findings_csv
from webtools.fetch import build_fetcher
from webtools.page_heuristics import PageHeuristicAnalyzer
from webtools.pipeline import AnalysisPipeline, validate_url
from webtools.scoring import summarize_report

logger = logging.getLogger("webtools.app")

DEFAULT_CONFIG = {
    "Fetcher": {
        "mode": "proxy",
        "primary_proxy": "https://api.allorigins.win/raw?url={url}",
        "backup_proxy": "https://corsproxy.io/?url={url}",
    },
    "PageHeuristicAnalyzer": {
        "load_time_source": "measured", # "measured" uses fetch time, "simulated" draws a random value
        "load_time_min": 0.5, "load_time_max": 3.5,
        "slow_load_threshold": 2.0,
    },
    "Global": {"request_timeout": 10, "debug": False}
}


def merge_config(base: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items(): # Shallow merge per section
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(path=None) -> dict:
    if not path:
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(path, 'r') as f:
            custom_config = json.load(f)
    except FileNotFoundError:
        logger.warning("Config file %s not found. Using default settings.", path)
        return copy.deepcopy(DEFAULT_CONFIG)
    except json.JSONDecodeError as e:
        logger.warning("Error decoding JSON from %s (%s). Using default settings.", path, e)
        return copy.deepcopy(DEFAULT_CONFIG)
    logger.info("Loaded custom configuration from %s", path)
    return merge_config(DEFAULT_CONFIG, custom_config)


def configure_logging(config: dict):
    debug = bool(config.get("Global", {}).get("debug"))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class WebToolsAnalyzer:
    def __init__(self, config=None, output_format="json", session=None):
        self.config = config if config else copy.deepcopy(DEFAULT_CONFIG)
        self.output_format = output_format
        self.session = session # injected HTTP session, mostly for tests
        self.report = None
        self.domain = None

    def build_pipeline(self, mode=None, channel=None) -> AnalysisPipeline:
        fetcher = build_fetcher(self.config, mode=mode, session=self.session)
        return AnalysisPipeline(fetcher, channel=channel, config=self.config)

    def run_analysis(self, target_url, mode=None, channel=None) -> dict:
        """
        Fetches and analyzes `target_url`, returning the JSON-ready report.
        InvalidInputError and TransportError propagate to the caller.
        """
        pipeline = self.build_pipeline(mode=mode, channel=channel)
        report = pipeline.run(target_url)
        self.domain = urlparse(report.url).netloc
        self.report = report
        result = report.to_dict()
        result["summary"] = summarize_report(report)
        result["fetch_mode"] = mode or self.config.get("Fetcher", {}).get("mode", "proxy")
        return result

    def analyze_markup(self, target_url, html) -> dict:
        """Analyzes caller-supplied markup without fetching anything."""
        url = validate_url(target_url)
        if not isinstance(html, str):
            raise InvalidInputError("HTML payload must be a string")
        analyzer = PageHeuristicAnalyzer(config=self.config.get("PageHeuristicAnalyzer", {}))
        report = analyzer.analyze(url, html)
        self.domain = urlparse(url).netloc
        self.report = report
        result = report.to_dict()
        result["summary"] = summarize_report(report)
        return result

    def save_report_to_file(self, filename_prefix="webtools_report", directory="reports"):
        if self.report is None:
            raise RuntimeError("No analysis has been run yet")
        if not os.path.exists(directory):
            os.makedirs(directory)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_domain_name = self.domain.replace(".", "_").replace(":", "_")
        filename = os.path.join(directory, f"{filename_prefix}_{safe_domain_name}_{timestamp}.{self.output_format}")
        payload = self.report.to_dict()
        payload["summary"] = summarize_report(self.report)
        try:
            with open(filename, "w") as f:
                if self.output_format == "json": json.dump(payload, f, indent=4)
                else: f.write(format_text_report(payload))
            logger.info("Report saved to %s", filename)
            return filename
        except IOError as e:
            logger.error("Error saving report: %s", e)
            return None

    def export_csv(self, directory):
        if self.report is None:
            raise RuntimeError("No analysis has been run yet")
        os.makedirs(directory, exist_ok=True)
        export_metrics_csv(os.path.join(directory, "metrics.csv"), self.report)
        export_findings_csv(os.path.join(directory, "findings.csv"), self.report)


def format_text_report(payload: dict) -> str:
    lines = [f"URL: {payload['url']}", f"Analyzed at: {payload['analyzed_at']}"]
    if payload.get("page_title"):
        lines.append(f"Title: {payload['page_title']}")
    lines.append("")
    lines.append("Metrics:")
    for m in payload["metrics"]:
        lines.append(f"  {m['metric']}: {m['value']}")
    lines.append("")
    lines.append("Findings:")
    if not payload["findings"]:
        lines.append("  none")
    for f in payload["findings"]:
        lines.append(f"  [{f['severity']}] {f['type']}: {f['description']}")
    return "\n".join(lines) + "\n"


def _sse(event_name: str, data: dict) -> str:
    return f"event: {event_name}\ndata: {json.dumps(data)}\n\n"


def create_app(config=None, session=None):
    """Builds the Flask API. `session` replaces the HTTP session used by fetchers."""
    if Flask is None:
        raise RuntimeError("Flask is not installed")
    flask_app = Flask(__name__)
    flask_app.config["WEBTOOLS"] = config if config else copy.deepcopy(DEFAULT_CONFIG)

    def _analyzer():
        return WebToolsAnalyzer(config=copy.deepcopy(flask_app.config["WEBTOOLS"]), session=session)

    def _request_params():
        if request.method == 'GET':
            return request.args
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else None

    @flask_app.route('/analyze', methods=['POST', 'GET'])
    def analyze_endpoint():
        data = _request_params()
        if data is None:
            return jsonify({"error": "Invalid JSON payload"}), 400
        url_to_analyze = data.get('url')
        if not url_to_analyze:
            return jsonify({"error": "URL parameter is required"}), 400
        try:
            return jsonify(_analyzer().run_analysis(url_to_analyze, mode=data.get('mode')))
        except InvalidInputError as e:
            return jsonify({"error": str(e)}), 400
        except TransportError as e:
            return jsonify(e.to_dict()), 502
        except ValueError as e: # unknown fetch mode
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.exception("Unexpected error analyzing %s", url_to_analyze)
            return jsonify({"error": f"An unexpected error occurred: {str(e)}"}), 500

    @flask_app.route('/analyze/html', methods=['POST'])
    def analyze_html_endpoint():
        data = _request_params()
        if data is None:
            return jsonify({"error": "Invalid JSON payload"}), 400
        if not data.get('url'):
            return jsonify({"error": "URL parameter is required"}), 400
        try:
            return jsonify(_analyzer().analyze_markup(data.get('url'), data.get('html')))
        except InvalidInputError as e:
            return jsonify({"error": str(e)}), 400

    @flask_app.route('/analyze/stream', methods=['GET'])
    def analyze_stream_endpoint():
        url_to_analyze = request.args.get('url')
        if not url_to_analyze:
            return jsonify({"error": "URL parameter is required"}), 400
        try:
            url_to_analyze = validate_url(url_to_analyze)
        except InvalidInputError as e:
            return jsonify({"error": str(e)}), 400
        mode = request.args.get('mode')
        analyzer = _analyzer()
        events = queue.Queue()
        done = object()
        channel = EventChannel()

        def worker():
            with channel.subscribe(events.put, kinds=[ProgressLog, ResultReady]):
                try:
                    analyzer.run_analysis(url_to_analyze, mode=mode, channel=channel)
                except TransportError as e:
                    events.put(("error", e.to_dict()))
                except Exception as e:
                    events.put(("error", {"error": str(e)}))
            events.put(done)

        def generate():
            thread = threading.Thread(target=worker, daemon=True)
            thread.start()
            while True:
                item = events.get()
                if item is done:
                    break
                if isinstance(item, tuple):
                    yield _sse(item[0], item[1])
                elif isinstance(item, ResultReady):
                    payload = item.to_dict()
                    payload["summary"] = summarize_report(item.report)
                    yield _sse("result", payload)
                else:
                    yield _sse("progress", item.to_dict())
            thread.join()

        return Response(generate(), mimetype="text/event-stream")

    return flask_app


app = create_app() if Flask else None


def print_progress(event):
    if isinstance(event, ProgressLog):
        print(f"[{event.level}] {event.message}")


def run_cli():
    parser = argparse.ArgumentParser(description="WebTools page analyzer")
    parser.add_argument("url", nargs='?', default=None, help="The URL to analyze (omit to run in API/server mode).")
    parser.add_argument("--output", choices=["json", "txt"], default="json", help="Output format for the saved report.")
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON config file.")
    parser.add_argument("--mode", choices=["proxy", "direct"], default=None, help="Fetch through relay proxies or directly (overrides config).")
    parser.add_argument("--export-csv", type=str, default=None, help="Directory to export metrics.csv and findings.csv.")
    parser.add_argument("--quiet", action="store_true", help="Do not print progress messages.")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host for API mode.")
    parser.add_argument("--port", type=int, default=5000, help="Port for API mode.")

    args = parser.parse_args()
    current_config = load_config(args.config)
    configure_logging(current_config)

    # If URL is not provided, run in API/server mode. Otherwise, run in CLI mode.
    if not args.url:
        if not Flask:
            print("Error: Flask is not installed. Cannot run in API/server mode.")
            parser.print_help()
            return 1
        print(f"Starting Flask server on http://{args.host}:{args.port}/ (API mode)")
        create_app(config=current_config).run(host=args.host, port=args.port, debug=False)
        return 0

    channel = EventChannel()
    subscription = None if args.quiet else channel.subscribe(print_progress, kinds=[ProgressLog])
    analyzer = WebToolsAnalyzer(config=current_config, output_format=args.output)
    try:
        results = analyzer.run_analysis(args.url, mode=args.mode, channel=channel)
    except InvalidInputError as e:
        print(f"Error: {e}")
        return 2
    except TransportError as e:
        print(f"Error: could not fetch {e.url}: {e}")
        return 3
    finally:
        if subscription:
            subscription.unsubscribe()

    summary = results["summary"]
    print("\n--- Analysis Summary ---")
    print(f"URL Analyzed: {results['url']}")
    print(f"Timestamp: {results['analyzed_at']}")
    print(f"Checks passed: {summary['passed_checks']}/{summary['total_checks']} ({summary['pass_percent']}%)")
    for finding in results["findings"]:
        print(f"  [{finding['severity']}] {finding['type']}: {finding['description']}")

    analyzer.save_report_to_file()
    if args.export_csv:
        analyzer.export_csv(args.export_csv)
        print(f"CSV exports written to {args.export_csv}")
    return 0


if __name__ == "__main__":
    raise SystemExit(run_cli())
