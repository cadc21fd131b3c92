from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Union


BLANK_MARKER = "_____"

QUESTION_TYPE_READ_ALOUD = "readAloud"
QUESTION_TYPE_RWFIB = "rwfib"
QUESTION_TYPE_RFIB = "rfib"
QUESTION_TYPE_WFD = "wfd"

QUESTION_TYPES = (
    QUESTION_TYPE_READ_ALOUD,
    QUESTION_TYPE_RWFIB,
    QUESTION_TYPE_RFIB,
    QUESTION_TYPE_WFD,
)


def count_blanks(content: str) -> int:
    return len((content or "").split(BLANK_MARKER)) - 1


@dataclass
class PersonalInfo:
    full_name: str
    email: str
    phone: str
    target: int


@dataclass(frozen=True)
class ReadAloudQuestion:
    id: str
    content: str
    difficulty: str | None = None
    task_number: str | None = None
    type: str = QUESTION_TYPE_READ_ALOUD


@dataclass(frozen=True)
class RWFIBQuestion:
    id: str
    content: str
    options: Dict[str, List[str]]  # blank key -> choices for that blank
    correct_answers: List[str] = field(default_factory=list)
    difficulty: str | None = None
    task_number: str | None = None
    type: str = QUESTION_TYPE_RWFIB

    @property
    def all_options(self) -> List[str]:
        return [option for group in self.options.values() for option in group]


@dataclass(frozen=True)
class RFIBQuestion:
    id: str
    content: str
    options: List[str]  # shared draggable pool
    correct_answers: List[str] = field(default_factory=list)
    difficulty: str | None = None
    task_number: str | None = None
    type: str = QUESTION_TYPE_RFIB

    @property
    def all_options(self) -> List[str]:
        return list(self.options)


@dataclass(frozen=True)
class WFDQuestion:
    id: str
    text: str
    audio: Dict[str, str] = field(default_factory=dict)  # voice -> url
    type: str = QUESTION_TYPE_WFD

    @property
    def content(self) -> str:
        return self.text


Question = Union[ReadAloudQuestion, RWFIBQuestion, RFIBQuestion, WFDQuestion]


@dataclass
class NumberedQuestion:
    number: int
    question: Question


@dataclass
class Answer:
    question_number: int
    question_id: str
    question_type: str
    content: str
    answer: str
    text: str = ""
    timer: int = 0
    options: List[str] | Dict[str, List[str]] = field(default_factory=list)
    all_options: List[str] = field(default_factory=list)
    correct_answers: List[str] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass
class Submission:
    personal_info: PersonalInfo
    answers: Dict[str, Answer] = field(default_factory=dict)
    notes: str = ""
    status: str = "completed"
    created_at: datetime | None = None
    id: str | None = None


@dataclass(frozen=True)
class Score:
    correct: int = 0
    total: int = 0

    def __add__(self, other: "Score") -> "Score":
        return Score(self.correct + other.correct, self.total + other.total)


@dataclass(frozen=True)
class ScoreReport:
    rwfib: Score
    rfib: Score
    wfd: Score

    @property
    def total(self) -> Score:
        return self.rwfib + self.rfib + self.wfd
