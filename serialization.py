from __future__ import annotations

from typing import Any, Mapping

from api.utils.time_utils import to_utc_datetime
from models import (
    QUESTION_TYPE_READ_ALOUD,
    QUESTION_TYPE_RFIB,
    QUESTION_TYPE_RWFIB,
    QUESTION_TYPE_WFD,
    Answer,
    NumberedQuestion,
    PersonalInfo,
    Question,
    ReadAloudQuestion,
    RFIBQuestion,
    RWFIBQuestion,
    Score,
    ScoreReport,
    Submission,
    WFDQuestion,
    count_blanks,
)
from scoring import (
    CATEGORY_RANGES,
    category_for,
    format_score,
    normalize_words,
    percent,
    score_answer,
    split_blank_answers,
)


RWFIB_OPTIONS_PER_BLANK = 4
MAX_BLANKS = 10


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _grouped_options(value: Any) -> dict[str, list[str]]:
    if isinstance(value, dict):
        return {str(key): _str_list(group) for key, group in value.items()}
    flat = _str_list(value)
    return {
        str(index): flat[start:start + RWFIB_OPTIONS_PER_BLANK]
        for index, start in enumerate(range(0, len(flat), RWFIB_OPTIONS_PER_BLANK))
    }


def _flat_options(value: Any) -> list[str]:
    if isinstance(value, dict):
        return [option for group in value.values() for option in _str_list(group)]
    return _str_list(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def question_from_payload(payload: Mapping[str, Any]) -> Question:
    """Build the question variant matching ``payload["type"]``."""
    question_type = payload.get("type")
    question_id = str(payload.get("id") or "")
    content = str(payload.get("content") or "")
    difficulty = _optional_str(payload.get("difficulty"))
    task_number = _optional_str(payload.get("taskNumber"))

    if question_type == QUESTION_TYPE_READ_ALOUD:
        return ReadAloudQuestion(
            id=question_id,
            content=content,
            difficulty=difficulty,
            task_number=task_number,
        )
    if question_type == QUESTION_TYPE_RWFIB:
        return RWFIBQuestion(
            id=question_id,
            content=content,
            options=_grouped_options(payload.get("options")),
            correct_answers=_str_list(payload.get("correctAnswers")),
            difficulty=difficulty,
            task_number=task_number,
        )
    if question_type == QUESTION_TYPE_RFIB:
        return RFIBQuestion(
            id=question_id,
            content=content,
            options=_flat_options(payload.get("options")),
            correct_answers=_str_list(payload.get("correctAnswers")),
            difficulty=difficulty,
            task_number=task_number,
        )
    if question_type == QUESTION_TYPE_WFD:
        audio = payload.get("audio")
        return WFDQuestion(
            id=question_id,
            text=str(payload.get("text") or content),
            audio={str(k): str(v) for k, v in audio.items()} if isinstance(audio, dict) else {},
        )
    raise ValueError(f"Unknown question type: {question_type!r}")


def question_to_payload(
    question: Question, number: int | None = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": question.id,
        "type": question.type,
        "content": question.content,
    }
    if isinstance(question, (RWFIBQuestion, RFIBQuestion)):
        payload["options"] = question.options
        payload["allOptions"] = question.all_options
        payload["correctAnswers"] = list(question.correct_answers)
        payload["blankCount"] = count_blanks(question.content)
    if isinstance(question, WFDQuestion):
        payload["text"] = question.text
        payload["audio"] = dict(question.audio)
    else:
        payload["difficulty"] = question.difficulty
        payload["taskNumber"] = question.task_number
    if number is not None:
        payload["questionNumber"] = number
    return payload


def validate_question(question: Question) -> list[str]:
    """Write-time checks for a question; returns a list of problems."""
    problems: list[str] = []
    if not question.content.strip():
        problems.append("content is required")
    if isinstance(question, (RWFIBQuestion, RFIBQuestion)):
        blanks = count_blanks(question.content)
        if blanks == 0:
            problems.append("content has no blanks (use _____ to mark one)")
        if question.correct_answers and len(question.correct_answers) != blanks:
            problems.append(
                f"expected {blanks} correct answers, got {len(question.correct_answers)}"
            )
        if any("," in answer for answer in question.correct_answers):
            problems.append("correct answers cannot contain commas")
        if not question.all_options:
            problems.append("options are required")
    if isinstance(question, RWFIBQuestion):
        for key, group in question.options.items():
            if len(group) != RWFIB_OPTIONS_PER_BLANK:
                problems.append(
                    f"blank {key} needs {RWFIB_OPTIONS_PER_BLANK} options, got {len(group)}"
                )
    return problems


def format_blank_answers(values: Mapping[int, str]) -> str:
    """Join per-blank selections into the stored comma-separated answer.

    Unfilled blanks in the middle stay empty; unfilled blanks at the end
    are dropped.
    """
    answers = [""] * MAX_BLANKS
    for index, value in values.items():
        if 0 <= index < MAX_BLANKS:
            answers[index] = value
    while answers and answers[-1] == "":
        answers.pop()
    return ",".join(answers)


def build_answer(
    numbered: NumberedQuestion, response: str, timer: int = 0
) -> Answer:
    """Snapshot the grading inputs of a question alongside its response."""
    question = numbered.question
    options: list[str] | dict[str, list[str]] = []
    all_options: list[str] = []
    correct_answers: list[str] = []
    if isinstance(question, (RWFIBQuestion, RFIBQuestion)):
        options = question.options
        all_options = question.all_options
        correct_answers = list(question.correct_answers)
    return Answer(
        question_number=numbered.number,
        question_id=question.id,
        question_type=question.type,
        content=question.content,
        answer=response,
        text=question.content,
        timer=timer,
        options=options,
        all_options=all_options,
        correct_answers=correct_answers,
    )


def answer_from_payload(
    payload: Mapping[str, Any], question_number: int | None = None
) -> Answer:
    number = payload.get("questionNumber", question_number)
    if isinstance(number, bool) or not isinstance(number, int):
        number = question_number or 0
    options = payload.get("options")
    if not isinstance(options, (list, dict)):
        options = []
    timer = payload.get("timer")
    return Answer(
        question_number=number,
        question_id=str(payload.get("questionId") or ""),
        question_type=str(payload.get("questionType") or ""),
        content=str(payload.get("content") or ""),
        answer=str(payload.get("answer") or ""),
        text=str(payload.get("text") or ""),
        timer=timer if isinstance(timer, int) and not isinstance(timer, bool) else 0,
        options=options,
        all_options=_str_list(payload.get("allOptions")),
        correct_answers=_str_list(payload.get("correctAnswers")),
        created_at=to_utc_datetime(payload.get("timestamp")),
    )


def answer_to_payload(answer: Answer) -> dict[str, Any]:
    return {
        "questionNumber": answer.question_number,
        "questionId": answer.question_id,
        "questionType": answer.question_type,
        "content": answer.content,
        "answer": answer.answer,
        "text": answer.text,
        "timer": answer.timer,
        "options": answer.options,
        "allOptions": answer.all_options,
        "correctAnswers": answer.correct_answers,
        "timestamp": answer.created_at.isoformat() if answer.created_at else None,
    }


def personal_info_from_payload(payload: Mapping[str, Any]) -> PersonalInfo:
    target = payload.get("target")
    try:
        target_value = int(str(target).strip())
    except (TypeError, ValueError):
        raise ValueError(f"Target score must be a number, got {target!r}")
    return PersonalInfo(
        full_name=str(payload.get("fullName") or "").strip(),
        email=str(payload.get("email") or "").strip(),
        phone=str(payload.get("phone") or "").strip(),
        target=target_value,
    )


def personal_info_to_payload(info: PersonalInfo) -> dict[str, Any]:
    return {
        "fullName": info.full_name,
        "email": info.email,
        "phone": info.phone,
        "target": info.target,
    }


def submission_from_payload(payload: Mapping[str, Any]) -> Submission:
    """Parse an exported submission document (``personalInfo`` + ``answers``)."""
    info = payload.get("personalInfo")
    if not isinstance(info, dict):
        raise ValueError("Submission is missing personalInfo")
    raw_answers = payload.get("answers")
    if not isinstance(raw_answers, dict):
        raw_answers = {}
    answers: dict[str, Answer] = {}
    for key, value in raw_answers.items():
        if not isinstance(value, dict):
            continue
        number = int(key) if str(key).strip().isdigit() else None
        answers[str(key)] = answer_from_payload(value, number)
    return Submission(
        id=str(payload["id"]) if payload.get("id") else None,
        personal_info=personal_info_from_payload(info),
        answers=answers,
        notes=str(payload.get("notes") or ""),
        status=str(payload.get("status") or "completed"),
        created_at=to_utc_datetime(payload.get("timestamp")),
    )


def score_to_payload(score: Score) -> dict[str, Any]:
    return {
        "correct": score.correct,
        "total": score.total,
        "display": format_score(score),
        "percent": round(percent(score), 1),
    }


def score_report_to_payload(report: ScoreReport) -> dict[str, Any]:
    return {
        "rwfib": score_to_payload(report.rwfib),
        "rfib": score_to_payload(report.rfib),
        "wfd": score_to_payload(report.wfd),
        "total": score_to_payload(report.total),
    }


def answer_review(question_number: int | None, answer: Answer) -> dict[str, Any]:
    """Reviewer breakdown of one answer: its score and what was compared."""
    category = category_for(question_number)
    score = score_answer(question_number, answer)
    review: dict[str, Any] = {
        "category": category,
        "score": score_to_payload(score) if score is not None else None,
    }
    if category in ("rwfib", "rfib"):
        given = split_blank_answers(answer.answer)
        review["blanks"] = [
            {
                "expected": expected,
                "given": given[index] if index < len(given) else None,
                "isCorrect": index < len(given) and given[index] == expected,
            }
            for index, expected in enumerate(answer.correct_answers)
        ]
    elif category == "wfd":
        review["expectedWords"] = normalize_words(answer.text or answer.content)
        review["givenWords"] = normalize_words(answer.answer)
    return review


def category_numbers() -> dict[str, list[int]]:
    return {category: list(numbers) for category, numbers in CATEGORY_RANGES.items()}
