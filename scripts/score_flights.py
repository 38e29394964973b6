"""
Score a file of flights from the command line

Input is a JSON array of flight records or a CSV with the same column names
(flight_no, airline, departure_airport, arrival_airport, departure_time,
arrival_time, current_status).

Usage:
  python scripts/score_flights.py flights.json
  python scripts/score_flights.py flights.csv --now "2025-04-15 07:00" --output results.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from delay_risk.scoring import (
    BatchAggregator,
    batch_to_dict,
    predictions_to_frame,
    rank_high_risk,
)


def load_flights(path: Path) -> List[Dict[str, Any]]:
    """Read flight records from a JSON array or a CSV file."""
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str)
        # Empty cells become None so optional fields read as missing
        df = df.astype(object).where(df.notna(), None)
        return df.to_dict("records")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of flights in {path}")
    return data


def main() -> int:
    parser = argparse.ArgumentParser(description="Score flight delay risk in batch.")
    parser.add_argument("input", type=Path, help="JSON or CSV file of flights")
    parser.add_argument(
        "--now",
        default=None,
        help="Reference time for lead-time calculation. Default: current time.",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        help="Worker threads for batch scoring. Default: from scoring config.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Batch timeout in seconds. Default: no timeout.",
    )
    parser.add_argument(
        "--output", type=Path, default=None, help="Write the JSON batch result here."
    )
    args = parser.parse_args()

    flights = load_flights(args.input)
    now = pd.Timestamp(args.now) if args.now else None

    aggregator = BatchAggregator(n_jobs=args.n_jobs)
    result = aggregator.batch_predict(flights, now=now, timeout=args.timeout)

    print("=" * 60)
    print(f"DELAY RISK: {args.input.name}")
    print("=" * 60)

    if not result["success"]:
        print(f"[FAIL] {result['error']}")
        return 1

    frame = predictions_to_frame(result)
    print(frame.drop(columns=["index"]).to_string(index=False))

    summary = result["summary"]
    print("\nSummary:")
    for key, value in summary.to_dict().items():
        print(f"  {key:<24} {value}")

    high_risk = rank_high_risk(flights, result)
    if high_risk:
        print("\nHigh risk flights:")
        for item in high_risk:
            prediction = item["prediction"]
            print(
                f"  #{item['index']} {prediction.flight_number}: "
                f"{prediction.delay_probability}%"
            )

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(batch_to_dict(result), f, indent=2, ensure_ascii=False)
        print(f"\n[OK] Saved to: {args.output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
