"""CLI helpers for dishcarbon."""

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dishcarbon.config import configure_logging, get_settings
from dishcarbon.core.aggregate import FootprintAggregator
from dishcarbon.core.footprints import load_default_database
from dishcarbon.core.matcher import FootprintMatcher
from dishcarbon.core.models import EstimateSource, RawIngredient, Rejected, UploadedFile
from dishcarbon.core.normalize import normalize_ingredient_name
from dishcarbon.core.pipeline import validate_file, validate_text
from dishcarbon.errors import DishCarbonError

EXIT_ERROR = 1
EXIT_REJECTED = 2


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="dishcarbon")
    parser.add_argument("--log-level", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate_cmd = subparsers.add_parser("estimate", help="Estimate an ingredient list")
    estimate_cmd.add_argument("--dish", required=True)
    estimate_cmd.add_argument(
        "--ingredient",
        action="append",
        default=[],
        metavar="NAME[:CONFIDENCE]",
        help="Repeat for each ingredient",
    )
    estimate_cmd.add_argument(
        "--source", choices=[s.value for s in EstimateSource], default=EstimateSource.TEXT.value
    )

    text_cmd = subparsers.add_parser("validate-text", help="Validate a raw JSON request body")
    text_cmd.add_argument("body")

    file_cmd = subparsers.add_parser("validate-file", help="Validate an image upload")
    file_cmd.add_argument("file")
    file_cmd.add_argument("--mimetype", default=None)

    match_cmd = subparsers.add_parser("match", help="Show how an ingredient name resolves")
    match_cmd.add_argument("name")
    match_cmd.add_argument("--suggest", type=int, default=0)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return _run(parser, args)
    except DishCarbonError as exc:
        _write_json({"error": exc.to_dict()})
        return EXIT_ERROR


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    settings = get_settings()

    if args.command == "estimate":
        aggregator = FootprintAggregator(load_default_database(settings.footprint_table))
        ingredients = [parse_ingredient_arg(value) for value in args.ingredient]
        estimate = aggregator.aggregate(args.dish, ingredients, args.source)
        _write_json(dataclass_to_dict(estimate))
        return 0

    if args.command == "validate-text":
        try:
            body = json.loads(args.body)
        except json.JSONDecodeError:
            body = None
        outcome = validate_text(body)
        return _report(outcome)

    if args.command == "validate-file":
        path = Path(args.file)
        if not path.is_file():
            parser.error(f"validate-file: no such file: {args.file}")
        raw_bytes = path.read_bytes()
        mimetype = args.mimetype or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        upload = UploadedFile(
            buffer=raw_bytes, mimetype=mimetype, size=len(raw_bytes), originalname=path.name
        )
        outcome = validate_file(upload, settings.max_file_size_bytes)
        return _report(outcome)

    if args.command == "match":
        database = load_default_database(settings.footprint_table)
        matcher = FootprintMatcher()
        canonical = normalize_ingredient_name(args.name)
        match = matcher.match(canonical, database)
        record: dict[str, Any] = {
            "name": args.name,
            "canonical": canonical,
            "match": dataclass_to_dict(match),
            "carbon_kg": database[match.key],
        }
        if args.suggest:
            record["suggestions"] = [
                {"key": key, "score": round(score, 1)}
                for key, score in matcher.suggest(canonical, database, limit=args.suggest)
            ]
        _write_json(record)
        return 0

    return 1


def parse_ingredient_arg(value: str) -> RawIngredient:
    """Parse "name" or "name:confidence"; an unparseable confidence is dropped."""
    name, sep, confidence = value.rpartition(":")
    if not sep:
        return RawIngredient(name=value)
    try:
        return RawIngredient(name=name, confidence=float(confidence))
    except ValueError:
        return RawIngredient(name=value)


def _report(outcome: Any) -> int:
    if isinstance(outcome, Rejected):
        _write_json({"accepted": False, "error": outcome.to_dict()})
        return EXIT_REJECTED
    _write_json({"accepted": True, "value": dataclass_to_dict(outcome.value)})
    return 0


def _write_json(record: Any) -> None:
    sys.stdout.write(json.dumps(record, ensure_ascii=False, indent=2) + "\n")


def dataclass_to_dict(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        data = asdict(obj)
        return {key: dataclass_to_dict(value) for key, value in data.items()}
    if isinstance(obj, list):
        return [dataclass_to_dict(value) for value in obj]
    if isinstance(obj, dict):
        return {key: dataclass_to_dict(value) for key, value in obj.items()}
    return obj


if __name__ == "__main__":
    raise SystemExit(main())
