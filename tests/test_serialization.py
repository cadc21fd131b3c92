from datetime import datetime, timezone

import pytest

import serialization
from models import NumberedQuestion, RFIBQuestion, RWFIBQuestion, Score, ScoreReport, WFDQuestion


def test_question_from_payload_builds_variants() -> None:
    rwfib = serialization.question_from_payload(
        {
            "id": "q1",
            "type": "rwfib",
            "content": "A _____ b _____",
            "options": ["a", "b", "c", "d", "e", "f", "g", "h"],
            "correctAnswers": ["a", "e"],
            "taskNumber": " 12 ",
        }
    )
    assert isinstance(rwfib, RWFIBQuestion)
    assert rwfib.options == {"0": ["a", "b", "c", "d"], "1": ["e", "f", "g", "h"]}
    assert rwfib.all_options == ["a", "b", "c", "d", "e", "f", "g", "h"]
    assert rwfib.task_number == "12"

    rfib = serialization.question_from_payload(
        {"type": "rfib", "content": "_____", "options": {"0": ["x"], "1": ["y"]}}
    )
    assert isinstance(rfib, RFIBQuestion)
    assert rfib.options == ["x", "y"]

    wfd = serialization.question_from_payload(
        {"type": "wfd", "content": "Hello there", "audio": {"Brian": "https://a/b.mp3"}}
    )
    assert isinstance(wfd, WFDQuestion)
    assert wfd.content == "Hello there"
    assert wfd.audio == {"Brian": "https://a/b.mp3"}


def test_question_from_payload_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        serialization.question_from_payload({"type": "essay", "content": "x"})


def test_question_to_payload_includes_blank_count() -> None:
    question = RFIBQuestion(
        id="q", content="_____ and _____", options=["a", "b"], correct_answers=["a", "b"]
    )
    payload = serialization.question_to_payload(question, 7)
    assert payload["blankCount"] == 2
    assert payload["questionNumber"] == 7
    assert payload["allOptions"] == ["a", "b"]


def test_validate_question_reports_problems() -> None:
    good = RWFIBQuestion(
        id="q",
        content="I _____ here.",
        options={"0": ["am", "is", "are", "be"]},
        correct_answers=["am"],
    )
    assert serialization.validate_question(good) == []

    mismatched = RFIBQuestion(
        id="q", content="One _____.", options=["a"], correct_answers=["a", "b"]
    )
    assert any("expected 1" in p for p in serialization.validate_question(mismatched))

    no_blanks = RFIBQuestion(id="q", content="No gaps", options=["a"])
    assert any("no blanks" in p for p in serialization.validate_question(no_blanks))

    commas = RFIBQuestion(id="q", content="_____", options=["a"], correct_answers=["a,b"])
    assert any("commas" in p for p in serialization.validate_question(commas))

    short_group = RWFIBQuestion(
        id="q", content="_____", options={"0": ["a", "b"]}, correct_answers=["a"]
    )
    assert any("needs 4 options" in p for p in serialization.validate_question(short_group))


def test_format_blank_answers_keeps_gaps_and_trims_end() -> None:
    assert serialization.format_blank_answers({0: "cat", 2: "bird"}) == "cat,,bird"
    assert serialization.format_blank_answers({1: "dog"}) == ",dog"
    assert serialization.format_blank_answers({}) == ""
    assert serialization.format_blank_answers({0: "a", 12: "ignored"}) == "a"


def test_build_answer_snapshots_question(paper: list[NumberedQuestion]) -> None:
    answer = serialization.build_answer(paper[2], "blue,red", timer=12)
    assert answer.question_number == 7
    assert answer.question_id == "rf-1"
    assert answer.correct_answers == ["blue", "red"]
    assert answer.all_options == ["blue", "red", "green"]
    assert answer.text == answer.content
    assert answer.timer == 12


def test_submission_from_payload_normalizes_timestamps() -> None:
    submission = serialization.submission_from_payload(
        {
            "id": "sub-1",
            "personalInfo": {
                "fullName": " Ann ",
                "email": "ann@example.com",
                "phone": "123",
                "target": "65",
            },
            "answers": {
                "4": {
                    "questionId": "q",
                    "questionType": "rwfib",
                    "answer": "run",
                    "correctAnswers": ["run"],
                    "timestamp": {"seconds": 1700000000, "nanoseconds": 0},
                },
                "broken": "not an answer",
            },
            "timestamp": "2024-01-01T12:00:00Z",
        }
    )
    assert submission.personal_info.full_name == "Ann"
    assert submission.personal_info.target == 65
    assert list(submission.answers) == ["4"]
    assert submission.answers["4"].question_number == 4
    assert submission.answers["4"].created_at == datetime.fromtimestamp(
        1700000000, tz=timezone.utc
    )
    assert submission.created_at == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def test_personal_info_requires_numeric_target() -> None:
    with pytest.raises(ValueError):
        serialization.personal_info_from_payload(
            {"fullName": "A", "email": "a@b.c", "phone": "1", "target": "high"}
        )


def test_score_report_to_payload() -> None:
    report = ScoreReport(rwfib=Score(1, 1), rfib=Score(1, 2), wfd=Score(0, 0))
    payload = serialization.score_report_to_payload(report)
    assert payload["rfib"] == {"correct": 1, "total": 2, "display": "1/2", "percent": 50.0}
    assert payload["wfd"]["display"] == "0/0"
    assert payload["total"]["display"] == "2/3"


def test_answer_review_lists_blanks(paper: list[NumberedQuestion]) -> None:
    answer = serialization.build_answer(paper[2], "blue")
    review = serialization.answer_review(7, answer)
    assert review["category"] == "rfib"
    assert review["score"]["display"] == "1/2"
    assert review["blanks"] == [
        {"expected": "blue", "given": "blue", "isCorrect": True},
        {"expected": "red", "given": None, "isCorrect": False},
    ]

    dictation = serialization.build_answer(paper[3], "the cat")
    review = serialization.answer_review(10, dictation)
    assert review["expectedWords"] == ["the", "cat", "sat"]
    assert review["givenWords"] == ["the", "cat"]

    recording = serialization.build_answer(paper[0], "recordings/x.webm")
    assert serialization.answer_review(1, recording)["score"] is None
