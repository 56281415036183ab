"""assessment-cli — run assessments and query progress from the shell.

Usage:
    python -m assessment_cli.main catalog --category cardio
    python -m assessment_cli.main run cooper_test -i distance=2400 -i age=25 -i gender=male --user u1
    python -m assessment_cli.main progress u1 cooper_test --timeframe month --trend
    python -m assessment_cli.main compare u1 cooper_test 2026-01-01 2026-02-01

Every command prints JSON on stdout. Exit codes: 0 success, 1 invalid
input, 2 calculation error, 3 no recorded data, 4 unreadable history file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Sequence

from assessment_engine.engine import AssessmentEngine
from assessment_engine.exceptions import NoDataError, NotFoundError, StoreUnavailableError
from assessment_engine.interpretation.interpreter import ResultInterpreter
from assessment_engine.interpretation.norms import load_norms
from assessment_engine.models.enums import Difficulty, ProtocolCategory, Timeframe
from assessment_engine.serialization import (
    comparison_to_dict,
    outcome_to_dict,
    record_to_dict,
    summary_to_dict,
    trend_to_dict,
)
from assessment_engine.tracking.json_store import JsonFileHistoryStore
from assessment_engine.tracking.tracker import ProgressTracker

from assessment_cli.config import (
    HISTORY_PATH,
    LOG_LEVEL,
    NORMS_PATH,
    STORE_BACKOFF_S,
    STORE_RETRIES,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CALCULATION = 2
EXIT_NO_DATA = 3
EXIT_STORAGE = 4


def build_engine(
    history_path: Path,
    norms_path: Path | None = None,
    max_retries: int = STORE_RETRIES,
    backoff_s: float = STORE_BACKOFF_S,
) -> AssessmentEngine:
    """Wire an engine over a JSON history file and optional norm overrides."""
    store = JsonFileHistoryStore(history_path)
    tracker = ProgressTracker(store, max_retries=max_retries, backoff_s=backoff_s)
    interpreter = ResultInterpreter(load_norms(norms_path)) if norms_path else ResultInterpreter()
    return AssessmentEngine(interpreter=interpreter, tracker=tracker)


def _parse_inputs(pairs: Sequence[str]) -> dict[str, str]:
    inputs: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {pair!r}")
        inputs[name.strip()] = value.strip()
    return inputs


def _parse_when(text: str) -> date | datetime:
    """ISO date (end of that day) or ISO datetime."""
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text)
        return date.fromisoformat(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO date or datetime: {text!r}") from exc


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _cmd_catalog(engine: AssessmentEngine, args: argparse.Namespace) -> int:
    summaries = engine.get_protocol_catalog(category=args.category, difficulty=args.difficulty)
    _emit([summary_to_dict(s) for s in summaries])
    return EXIT_OK


def _cmd_run(engine: AssessmentEngine, args: argparse.Namespace) -> int:
    try:
        inputs = _parse_inputs(args.input)
    except argparse.ArgumentTypeError as exc:
        _emit({"error": str(exc)})
        return EXIT_INVALID

    outcome = engine.run_assessment(args.protocol_id, inputs, user_id=args.user)
    _emit(outcome_to_dict(outcome))
    if outcome.errors:
        return EXIT_INVALID
    if outcome.calculation_error is not None:
        return EXIT_CALCULATION
    if outcome.persistence_error is not None:
        logger.warning("Result was not saved: %s", outcome.persistence_error)
    return EXIT_OK


def _cmd_progress(engine: AssessmentEngine, args: argparse.Namespace) -> int:
    if args.trend:
        trend = engine.get_trend(args.user_id, args.protocol_id, args.timeframe)
        _emit(trend_to_dict(trend))
        return EXIT_OK if trend.count else EXIT_NO_DATA

    records = engine.get_progress(args.user_id, args.protocol_id, args.timeframe)
    _emit([record_to_dict(r) for r in records])
    return EXIT_OK if records else EXIT_NO_DATA


def _cmd_compare(engine: AssessmentEngine, args: argparse.Namespace) -> int:
    comparison = engine.compare_results(args.user_id, args.protocol_id, args.date1, args.date2)
    _emit(comparison_to_dict(comparison))
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assessment-cli", description="Fitness assessment protocols and progress tracking"
    )
    parser.add_argument(
        "--history", type=Path, default=HISTORY_PATH, help="JSON history file"
    )
    parser.add_argument(
        "--norms", type=Path, default=NORMS_PATH, help="JSON file overriding reference norms"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    catalog = sub.add_parser("catalog", help="List available protocols")
    catalog.add_argument("--category", choices=[c.value for c in ProtocolCategory])
    catalog.add_argument("--difficulty", choices=[d.value for d in Difficulty])
    catalog.set_defaults(handler=_cmd_catalog)

    run = sub.add_parser("run", help="Run one assessment")
    run.add_argument("protocol_id")
    run.add_argument(
        "-i", "--input", action="append", default=[], metavar="NAME=VALUE",
        help="Input field (repeatable)",
    )
    run.add_argument("--user", help="Record the result for this user")
    run.set_defaults(handler=_cmd_run)

    progress = sub.add_parser("progress", help="Show recorded results in a timeframe")
    progress.add_argument("user_id")
    progress.add_argument("protocol_id")
    progress.add_argument(
        "--timeframe", choices=[t.value for t in Timeframe], default=Timeframe.MONTH.value
    )
    progress.add_argument("--trend", action="store_true", help="Summarize instead of listing")
    progress.set_defaults(handler=_cmd_progress)

    compare = sub.add_parser("compare", help="Compare results at two dates")
    compare.add_argument("user_id")
    compare.add_argument("protocol_id")
    compare.add_argument("date1", type=_parse_when)
    compare.add_argument("date2", type=_parse_when)
    compare.set_defaults(handler=_cmd_compare)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        engine = build_engine(args.history, args.norms)
    except (OSError, ValueError) as exc:
        _emit({"error": f"Cannot load norms from {args.norms}: {exc}"})
        return EXIT_INVALID

    try:
        return args.handler(engine, args)
    except NotFoundError as exc:
        _emit({"error": str(exc)})
        return EXIT_INVALID
    except NoDataError as exc:
        _emit({"error": str(exc)})
        return EXIT_NO_DATA
    except StoreUnavailableError as exc:
        _emit({"error": str(exc)})
        return EXIT_STORAGE


if __name__ == "__main__":
    sys.exit(main())
