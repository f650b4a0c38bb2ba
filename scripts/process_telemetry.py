#!/usr/bin/env python3
"""Process a telemetry CSV and print the health report and pit call."""
import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from racesense.loaders import EmptyTelemetryError, load_telemetry_csv, parse_telemetry_csv
from racesense.pipeline import advance_strategy, build_race_strategy, process_telemetry
from racesense.sample_data import generate_sample_cota_data
from racesense.strategy.summary import summarize_race
from racesense.utils.io import save_json, to_serializable


def main():
    parser = argparse.ArgumentParser(description="Clean race telemetry and recommend a pit window")
    parser.add_argument("csv", nargs="?", type=Path, help="Telemetry CSV file")
    parser.add_argument("--sample", action="store_true", help="Use the built-in sample race")
    parser.add_argument("--current-lap", type=int, default=None, help="Lap to recommend from")
    parser.add_argument("--total-laps", type=int, default=None, help="Race distance in laps")
    parser.add_argument("--output", type=Path, default=None, help="Write a JSON report here")
    args = parser.parse_args()

    if not args.sample and args.csv is None:
        parser.error("pass a CSV file or --sample")

    try:
        if args.sample:
            raw = parse_telemetry_csv(generate_sample_cota_data())
        else:
            print(f"Loading {args.csv} ({args.csv.stat().st_size / 1024:.1f} KB)...")
            raw = load_telemetry_csv(args.csv)
    except EmptyTelemetryError as e:
        print(f"✗ No data: {e}", file=sys.stderr)
        sys.exit(1)

    result = process_telemetry(raw)
    health = result.health_report
    strategy = build_race_strategy(raw, result.laps)
    if args.total_laps is not None:
        strategy.total_laps = args.total_laps

    current_lap = args.current_lap or strategy.total_laps
    strategy = advance_strategy(strategy, current_lap)
    rec = strategy.pit_recommendations[0]
    summary = summarize_race(strategy.laps, strategy.tire_degradation, strategy.pit_recommendations)

    print(f"\n  📊 Telemetry Health:")
    print(f"     • Points: {result.raw_points}  Laps: {len(result.laps)}")
    print(f"     • Quality score: {health.data_quality_score:.1f}/100")
    print(f"     • Timestamp drift: {health.timestamp_drift_percent:.4f}%")
    print(f"     • Corrupt lap values: {health.lap_integrity.corrupted_laps}")
    print(f"     • Lap detection: {health.lap_integrity.lap_detection_method}")
    print(f"     • Car number changes: {health.car_number_mismatch_count}")

    print(f"\n  🏁 Race:")
    print(f"     • Best lap: {summary.best_lap_time:.3f}s (lap {summary.best_lap_number})")
    print(f"     • Average lap: {summary.average_lap_time:.3f}s")
    print(f"     • Observed pit lap: {summary.observed_pit_lap or '-'}")

    print(f"\n  🔧 Pit call at lap {rec.current_lap} [{rec.urgency}]: {rec.reason}")

    if args.output:
        save_json({
            "strategy": to_serializable(strategy),
            "health_report": to_serializable(health),
            "summary": to_serializable(summary),
        }, args.output)
        print(f"\n✓ Saved report to {args.output}")


if __name__ == "__main__":
    main()
