# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import argparse
import json
from pathlib import Path

from .console import MLConsole, configure_logging
from .env import get_bool_env
from .errors import HotcaseError
from .inference.cache import ModelCache
from .inference.predictor import ShapeClassifier, clear_saved_model, model_info, predict
from .matching.language import LinguaNaturalDetector, PygmentsProgramDetector
from .matching.matcher import RuleMatcher
from .schemas import Model, Regexp, Rule
from .storage import DirectoryStore, default_store
from .training.trainer import default_options


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hotcaseai", description="Train custom text classifiers and match rules.")
    parser.add_argument("--store-dir", default=None, help="Model store directory (default: HOTCASE_STORE_DIR)")
    parser.add_argument("--log-level", default=None, help="Log level (default: HOTCASE_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    train = sub.add_parser("train", help="Train a classifier from a file of positive samples, one per line")
    train.add_argument("model_id")
    train.add_argument("samples", type=Path)
    train.add_argument("--epochs", type=int, default=None)
    train.add_argument("--seed", type=int, default=None)

    score = sub.add_parser("predict", help="Score a text with a trained classifier")
    score.add_argument("model_id")
    score.add_argument("text")

    matcher = sub.add_parser("match", help="Match a text against the rules of a JSON settings file")
    matcher.add_argument("settings", type=Path)
    matcher.add_argument("text")

    info = sub.add_parser("info", help="Show stored size and vocabulary of a classifier")
    info.add_argument("model_id")

    clear = sub.add_parser("clear", help="Remove every stored artifact of a classifier")
    clear.add_argument("model_id")
    return parser.parse_args(argv)


def _load_settings(path: Path) -> tuple[list[Rule], list[Model], list[Regexp]]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    rules = [Rule.from_dict(item) for item in payload.get("rules", [])]
    models = [Model.from_dict(item) for item in payload.get("models", [])]
    regexps = [Regexp.from_dict(item) for item in payload.get("regexps", [])]
    return rules, models, regexps


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    console = MLConsole(enabled=not get_bool_env("HOTCASE_QUIET", False))
    store = DirectoryStore(Path(args.store_dir).expanduser()) if args.store_dir else default_store()
    cache = ModelCache()

    try:
        if args.command == "train":
            console.banner()
            options = default_options()
            if args.epochs is not None:
                options.epochs = max(args.epochs, 1)
            if args.seed is not None:
                options.seed = args.seed
            classifier = ShapeClassifier(args.model_id, store=store, cache=cache)
            history = classifier.train(args.samples.read_text(encoding="utf-8"), options)
            console.history_table(history)
            console.metrics_table(history.to_metrics(), title=f"Model {args.model_id}")
            console.success(f"model trained: {args.model_id}")
        elif args.command == "predict":
            confidence = predict(args.model_id, args.text, store=store, cache=cache)
            if confidence is None:
                console.warn(f"model unavailable: {args.model_id}")
                return 1
            console.info(f"confidence={confidence:.4f}")
        elif args.command == "match":
            rules, models, regexps = _load_settings(args.settings)
            matcher = RuleMatcher(
                models=models,
                regexps=regexps,
                natural_detector=LinguaNaturalDetector(),
                program_detector=PygmentsProgramDetector(),
                store=store,
                cache=cache,
            )
            rule = matcher.match(args.text, rules)
            if rule is None:
                console.warn("no matching rule")
                return 1
            console.success(f"rule={rule.id} case={rule.case or '-'} label={rule.case_label or '-'} action={rule.action}")
        elif args.command == "info":
            console.metrics_table(model_info(args.model_id, store=store), title=f"Model {args.model_id}")
        elif args.command == "clear":
            clear_saved_model(args.model_id, store=store, cache=cache)
            console.success(f"cleared: {args.model_id}")
    except (HotcaseError, OSError, json.JSONDecodeError) as exc:
        console.warn(str(exc))
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
