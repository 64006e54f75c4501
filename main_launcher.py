"""
Main Launcher Script for denial-lens.

Runs one analysis from the command line:
1. Loads settings from data/config/
2. Parses the extraction model's reply for a denial letter
3. Loads the claims dataset and matches the letter against it on a worker thread
4. Prints a JSON report (matches, chart series, risk summary)

Usage:
    python main_launcher.py reply.txt [--dataset PATH] [--threshold X] [--risk-factor gender]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication

from denial_lens.analytics.risk import RISK_FACTORS, DEFAULT_FACTOR, risk_summary
from denial_lens.config.settings import load_settings
from denial_lens.engine.analysis_worker import AnalysisWorker
from denial_lens.engine.errors import ConfigurationError
from denial_lens.engine.session import AnalysisSession
from denial_lens.extraction.response import ParseFailure, parse_extraction_response
from denial_lens.loader.data_loader import read_text_file
from denial_lens.utils.path_utils import get_base_path

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("denial_lens")


def parse_args(argv):
    parser = argparse.ArgumentParser(
        description="Match a claim-denial letter extraction against the claims dataset."
    )
    parser.add_argument("response", help="File holding the extraction model's reply")
    parser.add_argument(
        "--dataset", help="Claims CSV, relative to the current directory (default: from settings, under data/)"
    )
    parser.add_argument("--threshold", type=float, help="Match threshold in [0, 1]; lower is stricter")
    parser.add_argument(
        "--risk-factor", choices=sorted(RISK_FACTORS), default=DEFAULT_FACTOR,
        help="Attribute to group risk scores by",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the application."""
    args = parse_args(sys.argv[1:] if argv is None else argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    settings = load_settings(base_path=str(get_base_path()))
    try:
        session = AnalysisSession(settings, threshold=args.threshold)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        reply = read_text_file(args.response)
    except OSError as e:
        logger.error("Could not open the extraction reply: %s", e)
        return 1

    extraction = parse_extraction_response(reply)
    if isinstance(extraction, ParseFailure):
        logger.error("Could not read the extraction reply: %s", extraction.reason)
        return 1

    outcome = {}
    # --dataset is relative to the working directory; the settings default is relative to data/
    dataset_path = str(Path(args.dataset).resolve()) if args.dataset else settings.dataset_file
    worker = AnalysisWorker(session, extraction.fields, dataset_path)
    worker.result_ready.connect(lambda result: outcome.update(result=result))
    worker.error.connect(lambda message: outcome.update(error=message))
    worker.finished.connect(app.quit)
    worker.start()
    app.exec()
    worker.wait()

    if "error" in outcome or "result" not in outcome:
        logger.error("Analysis failed: %s", outcome.get("error", "no result"))
        return 1

    report = outcome["result"].to_dict()
    report["extraction"] = type(extraction).__name__
    report["risk"] = risk_summary(session.dataset, args.risk_factor)
    print(json.dumps(report, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
