import pytest

import scoring
from models import Answer, Score


def make_answer(answer: str, correct_answers=None, content: str = "", text: str = "") -> Answer:
    return Answer(
        question_number=0,
        question_id="q",
        question_type="",
        content=content,
        answer=answer,
        text=text,
        correct_answers=list(correct_answers or []),
    )


def test_normalize_words_strips_punctuation_and_case() -> None:
    assert scoring.normalize_words("The Cat, sat!") == ["the", "cat", "sat"]
    assert scoring.normalize_words("  don't   stop  ") == ["dont", "stop"]
    assert scoring.normalize_words("") == []
    assert scoring.normalize_words(None) == []
    assert scoring.normalize_words("...") == []


def test_normalize_words_is_idempotent() -> None:
    once = scoring.normalize_words("Hello, World! It's: \"fine\";")
    assert scoring.normalize_words(" ".join(once)) == once


def test_match_words_caps_repeated_words() -> None:
    assert scoring.match_words(["a", "a", "b"], ["a", "a", "a"]) == Score(2, 3)


def test_match_words_ignores_order() -> None:
    assert scoring.match_words(["the", "cat", "sat"], ["sat", "the", "cat"]) == Score(3, 3)


@pytest.mark.parametrize(
    "reference, candidate",
    [
        (["a", "b", "c"], []),
        ([], ["a"]),
        (["a"], ["a", "a", "a"]),
        (["x", "y", "x"], ["x", "x", "y", "z"]),
    ],
)
def test_match_words_never_exceeds_either_side(reference, candidate) -> None:
    score = scoring.match_words(reference, candidate)
    assert score.correct <= min(len(reference), len(candidate))
    assert score.total == len(reference)


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("cat,dog,bird", Score(3, 3)),
        ("cat,fish,bird", Score(2, 3)),
        ("cat", Score(1, 3)),
        (" cat , dog ,bird ", Score(3, 3)),
        ("Cat,dog,bird", Score(2, 3)),
        ("", Score(0, 3)),
        ("cat,dog,bird,extra", Score(3, 3)),
    ],
)
def test_score_blanks_positional(answer: str, expected: Score) -> None:
    assert scoring.score_blanks(answer, ["cat", "dog", "bird"]) == expected


def test_score_blanks_falls_back_to_blank_count() -> None:
    content = "One _____ two _____."
    assert scoring.score_blanks("a,b", [], content) == Score(0, 2)
    assert scoring.score_blanks(None, None, None) == Score(0, 0)


def test_score_dictation() -> None:
    assert scoring.score_dictation("the cat sit", "The cat sat.") == Score(2, 3)
    assert scoring.score_dictation("", "The cat sat.") == Score(0, 3)
    assert scoring.score_dictation("anything", "") == Score(0, 0)


@pytest.mark.parametrize(
    "key, expected",
    [("4", 4), (" 12", 12), ("7abc", 7), (5, 5), ("abc", None), ("", None), (True, None)],
)
def test_parse_question_number(key, expected) -> None:
    assert scoring.parse_question_number(key) == expected


def test_category_for_boundaries() -> None:
    assert scoring.category_for(1) == scoring.CATEGORY_READ_ALOUD
    assert scoring.category_for(3) == scoring.CATEGORY_READ_ALOUD
    assert scoring.category_for(4) == scoring.CATEGORY_RWFIB
    assert scoring.category_for(9) == scoring.CATEGORY_RFIB
    assert scoring.category_for(12) == scoring.CATEGORY_WFD
    assert scoring.category_for(0) is None
    assert scoring.category_for(13) is None
    assert scoring.category_for(None) is None


def test_category_follows_question_number_not_answer_type() -> None:
    dictation_like = make_answer("run", ["run"])
    dictation_like.question_type = "wfd"
    answers = {"3": make_answer("run", ["run"]), "5": dictation_like}

    report = scoring.score_submission(answers)

    assert report.rwfib == Score(1, 1)
    assert report.rfib == Score(0, 0)
    assert report.wfd == Score(0, 0)


def test_score_submission_end_to_end() -> None:
    answers = {
        "4": make_answer("run", ["run"]),
        "7": make_answer("blue,green", ["blue", "red"]),
        "10": make_answer("the cat sit", text="the cat sat"),
    }

    report = scoring.score_submission(answers)

    assert report.rwfib == Score(1, 1)
    assert report.rfib == Score(1, 2)
    assert report.wfd == Score(2, 3)
    assert report.total == Score(4, 6)
    assert report.total == report.rwfib + report.rfib + report.wfd


def test_score_submission_ignores_unscored_and_unknown_keys() -> None:
    answers = {
        "1": make_answer("recordings/placement_test_ra_1_1.webm"),
        "notes": make_answer("run", ["run"]),
        "42": make_answer("run", ["run"]),
    }
    report = scoring.score_submission(answers)
    assert report.total == Score(0, 0)


def test_score_submission_empty() -> None:
    report = scoring.score_submission({})
    assert report.total == Score(0, 0)
    assert scoring.format_score(report.total) == "0/0"
    assert scoring.percent(report.total) == 0.0


def test_dictation_falls_back_to_content() -> None:
    answer = make_answer("the dog", content="The dog barked")
    assert scoring.score_answer(11, answer) == Score(2, 3)


def test_format_score_and_percent() -> None:
    assert scoring.format_score(Score(3, 4)) == "3/4"
    assert scoring.percent(Score(3, 4)) == 75.0
