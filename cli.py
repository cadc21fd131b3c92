import argparse
import sys
from pathlib import Path

from core.logging_setup import setup_console_logging
from scoring import SCORED_CATEGORIES, format_score, score_submission
from serialization import score_report_to_payload, submission_from_payload

setup_console_logging()

CATEGORY_LABELS = {
    "rwfib": "Reading & Writing: Fill in the Blanks",
    "rfib": "Reading: Fill in the Blanks",
    "wfd": "Write From Dictation",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Placement test tools")
    commands = parser.add_subparsers(dest="command", required=True)

    score = commands.add_parser("score", help="Score an exported submission")
    score.add_argument("file", type=Path, help="Path to submission JSON")
    score.add_argument(
        "--json",
        action="store_true",
        help="Print scores as JSON instead of text",
    )

    load = commands.add_parser(
        "import-questions", help="Add questions from a JSON list to the bank"
    )
    load.add_argument("file", type=Path, help="Path to questions JSON")
    return parser.parse_args(argv)


def score_command(path: Path, as_json: bool) -> int:
    from api.utils import json_dump, read_json_file

    payload = read_json_file(path, None)
    if not isinstance(payload, dict):
        print(f"{path}: expected a submission object", file=sys.stderr)
        return 1
    try:
        submission = submission_from_payload(payload)
    except ValueError as exc:
        print(f"{path}: {exc}", file=sys.stderr)
        return 1

    report = score_submission(submission.answers)
    if as_json:
        print(json_dump(score_report_to_payload(report)))
        return 0

    print(f"{submission.personal_info.full_name} (target {submission.personal_info.target})")
    for category in SCORED_CATEGORIES:
        print(f"  {CATEGORY_LABELS[category]}: {format_score(getattr(report, category))}")
    print(f"  Total: {format_score(report.total)}")
    return 0


def import_questions_command(path: Path) -> int:
    from fastapi import HTTPException
    from pydantic import ValidationError

    from api.database import SessionLocal, init_db
    from api.models import QuestionCreate
    from api.services.question_service import create_question
    from api.utils import read_json_file

    items = read_json_file(path, None)
    if not isinstance(items, list):
        print(f"{path}: expected a list of questions", file=sys.stderr)
        return 1

    init_db()
    db = SessionLocal()
    added = 0
    failed = 0
    try:
        for index, item in enumerate(items):
            try:
                create_question(db, QuestionCreate.model_validate(item))
                added += 1
            except (HTTPException, ValidationError) as exc:
                failed += 1
                detail = exc.detail if isinstance(exc, HTTPException) else exc
                print(f"question {index}: {detail}", file=sys.stderr)
    finally:
        db.close()

    print(f"Added {added} questions ({failed} rejected)")
    return 0 if failed == 0 else 1


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "score":
        return score_command(args.file, args.json)
    return import_questions_command(args.file)


if __name__ == "__main__":
    sys.exit(main())
