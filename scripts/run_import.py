"""
Demo script: import OMIE daily files for a date range via the public API.

Usage:
    uv run python scripts/run_import.py 2024-01-01 2024-01-07
    uv run python scripts/run_import.py 2024-01-01 2024-01-07 --config omie.yaml
    uv run python scripts/run_import.py 2024-01-01 2024-01-07 --csv prices.csv

Without --config, marginal prices are imported with default settings.
Each imported day is summarized on the log; --csv writes every parsed
record as a long-format CSV (date, hour, field, value).
"""

from __future__ import annotations

import argparse
import logging
from datetime import date

import pandas as pd

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(threadName)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_import")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    import omie_ingest

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("start", type=date.fromisoformat, help="first date (YYYY-MM-DD)")
    parser.add_argument("end", type=date.fromisoformat, help="last date (YYYY-MM-DD)")
    parser.add_argument("--config", help="path to an omie-ingest YAML config")
    parser.add_argument("--csv", help="write parsed records to this CSV file")
    args = parser.parse_args()

    days = omie_ingest.import_range(args.start, args.end, config=args.config)

    for day in days:
        if day.ok:
            log.info(
                "%s  %d record(s), %d hour(s)",
                day.date, len(day.result.records), len(day.result.hours()),
            )
        else:
            log.warning("%s  FAILED  %s", day.date, day.error)

    if args.csv:
        frames = [d.result.to_frame() for d in days if d.ok]
        if frames:
            pd.concat(frames, ignore_index=True).to_csv(args.csv, index=False)
            log.info("Wrote %s", args.csv)
        else:
            log.warning("Nothing parsed; %s not written", args.csv)

    failed = sum(1 for d in days if not d.ok)
    log.info("Done: %d day(s), %d failed", len(days), failed)


if __name__ == "__main__":
    main()
