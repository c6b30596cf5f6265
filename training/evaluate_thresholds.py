#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path

from hotcaseai.console import MLConsole, configure_logging
from hotcaseai.evaluation.evaluate import evaluate_model
from hotcaseai.storage import DirectoryStore, default_store


def _read_lines(path: Path) -> list[str]:
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate precision/recall/F1 of a trained classifier across thresholds.")
    parser.add_argument("--model-id", required=True, help="Classifier id")
    parser.add_argument("--positives", required=True, type=Path, help="Text file of matching samples, one per line")
    parser.add_argument("--negatives", required=True, type=Path, help="Text file of non-matching samples, one per line")
    parser.add_argument("--threshold", type=float, default=0.5, help="Threshold of the summary metrics")
    parser.add_argument("--store-dir", default=None, help="Model store directory")
    parser.add_argument("--output", default="threshold_eval.json", type=Path, help="JSON report path")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    configure_logging()
    console = MLConsole()
    store = DirectoryStore(Path(args.store_dir).expanduser()) if args.store_dir else default_store()

    try:
        report = evaluate_model(
            args.model_id,
            _read_lines(args.positives),
            _read_lines(args.negatives),
            threshold=args.threshold,
            store=store,
        )
    except LookupError as exc:
        console.warn(str(exc))
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(report, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")

    console.metrics_table(report["metrics"], title=f"{args.model_id} @ {args.threshold:.2f}")
    console.threshold_table(report["thresholds"])
    console.success(f"report: {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
