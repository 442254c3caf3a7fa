#!/usr/bin/env python
"""
Report Entry Point

Runs the fashion retail report once and writes its tables as CSV.
Usage:
    python scripts/run_report.py
    python scripts/run_report.py --source-dir data/generated --output-dir data/report
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fashion_analytics.config.logging import configure_logging
from fashion_analytics.exceptions import AnalysisError
from fashion_analytics.pipeline import ReportPipeline


def main() -> int:
    parser = argparse.ArgumentParser(description="Fashion retail statistical report")
    parser.add_argument("--source-dir", help="Directory holding the six relation files")
    parser.add_argument("--output-dir", help="Directory for the report tables")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    args = parser.parse_args()

    configure_logging(args.log_level)

    pipeline = ReportPipeline()
    try:
        result = pipeline.run(source_dir=args.source_dir)
    except AnalysisError:
        return 1

    written = pipeline.write_tables(result, output_dir=args.output_dir)

    print(f"\n📁 Report tables ({len(written)}):")
    for name, path in written.items():
        print(f"   📄 {name}: {path}")

    r = result.regression
    print(f"\n📈 Regression: R² = {r.r_squared:.4f} (n = {r.n:,})")
    for interval in result.confidence_intervals:
        print(
            f"   discount_applied={interval.group_key}: mean {interval.mean:.2f}, "
            f"{interval.confidence:.0%} CI "
            f"[{interval.lower_bound:.2f}, {interval.upper_bound:.2f}]"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
