"""Restore benchmark analysis: CSV in, two bar charts out."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from restorebench import aggregator, charts
from restorebench.config import load_config
from restorebench.errors import RestoreBenchError
from restorebench.records import parse_rows, read_experiments
from restorebench.report import Report, assemble_report, summary_frame
from restorebench.store import ExperimentStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] - %(message)s"


class RestoreAnalyzer:
    """
    Runs the pipeline for one experiments file: read, ingest, aggregate,
    assemble the report and render the charts.
    """
    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.input_path = Path(config['input_path'])
        self.output_dir = Path(config['output_dir'])
        self.strict = bool(config['strict_numeric'])

        self.rows: List[List[str]] = []
        self.store = ExperimentStore()
        self.report: Optional[Report] = None
        self.chart_paths: List[Path] = []

    def run(self) -> Report:
        """Executes every stage; any failure propagates before charts are written."""
        logger.info(f"Starting analysis of {self.input_path}")
        policy = 'strict' if self.strict else 'coerce to 0'
        logger.info(f"Numeric parse policy: {policy}")

        self.load_rows()
        self.build_store()
        self.compute_statistics()
        self.render()

        logger.info(f"{'='*25} ANALYSIS COMPLETE {'='*25}")
        for path in self.chart_paths:
            logger.info(f"Chart saved to: {path}")
        return self.report

    # --------------------------------------------------------------------------
    # STAGE 1: LOADING AND INGESTION
    # --------------------------------------------------------------------------

    def load_rows(self) -> List[List[str]]:
        self.rows = read_experiments(self.input_path)
        return self.rows

    def build_store(self) -> ExperimentStore:
        count = self.store.ingest_all(parse_rows(self.rows, strict=self.strict))
        logger.info(f"Ingested {count} measurement rows.")

        coerced = sum(stats.coerced_rows for stats in self.store)
        if coerced:
            logger.warning(f"{coerced} rows had non-numeric fields coerced to 0.")
        return self.store

    # --------------------------------------------------------------------------
    # STAGE 2: STATISTICAL COMPUTATION
    # --------------------------------------------------------------------------

    def compute_statistics(self) -> Report:
        logger.info("Computing statistics...")
        aggregator.finalize_store(self.store)
        self.report = assemble_report(self.store)
        logger.info("Summary:\n%s", summary_frame(self.report).to_string(index=False))
        return self.report

    # --------------------------------------------------------------------------
    # STAGE 3: RENDERING
    # --------------------------------------------------------------------------

    def render(self) -> List[Path]:
        self.chart_paths = charts.render_report(self.report, self.output_dir, self.config['charts'])
        return self.chart_paths


# --- SCRIPT EXECUTION ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarizes restore benchmark experiments into restore duration and memory footprint charts.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--config', type=Path, help="YAML configuration file (default: the packaged config.yaml).")
    parser.add_argument('--input', type=Path, help="Experiments CSV file. Overrides 'input_path'.")
    parser.add_argument('--output-dir', type=Path, help="Directory for the charts. Overrides 'output_dir'.")
    parser.add_argument('--strict', action='store_true', help="Abort on non-numeric values instead of coercing them to 0.")
    parser.add_argument('--error-bars', action='store_true', help="Draw standard deviation error bars.")
    parser.add_argument('--verbose', action='store_true', help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        config = load_config(args.config)
        if args.input:
            config['input_path'] = str(args.input)
        if args.output_dir:
            config['output_dir'] = str(args.output_dir)
        if args.strict:
            config['strict_numeric'] = True
        if args.error_bars:
            config['charts']['error_bars'] = True

        RestoreAnalyzer(config).run()
    except RestoreBenchError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
