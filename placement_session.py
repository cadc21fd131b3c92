"""State machine for one candidate sitting the placement test.

The session moves through explicit phases instead of scattered flags::

    collecting_info -> (prepping -> recording ->)? answering -> ... -> submitting -> done

Read Aloud questions pass through ``prepping`` and ``recording`` driven by
``tick``; every other question goes straight to ``answering``. ``next``
advances to the following question or, after the last one, to
``submitting``. The caller persists the result of ``build_submission`` and
then calls ``mark_submitted`` (or ``mark_submit_failed`` to retry).
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from models import (
    QUESTION_TYPE_READ_ALOUD,
    QUESTION_TYPE_RFIB,
    QUESTION_TYPE_RWFIB,
    Answer,
    NumberedQuestion,
    PersonalInfo,
    Submission,
)
from scoring import CATEGORY_RANGES, CATEGORY_READ_ALOUD
from serialization import build_answer, format_blank_answers

logger = logging.getLogger(__name__)

DEFAULT_PREP_SECONDS = 35
DEFAULT_RECORD_SECONDS = 40


class SessionPhase(str, enum.Enum):
    COLLECTING_INFO = "collecting_info"
    PREPPING = "prepping"
    RECORDING = "recording"
    ANSWERING = "answering"
    SUBMITTING = "submitting"
    DONE = "done"


class SessionEvent(str, enum.Enum):
    """Side effects the caller has to perform after a transition."""

    START_RECORDING = "start_recording"
    STOP_RECORDING = "stop_recording"
    SUBMIT = "submit"


class InvalidTransition(RuntimeError):
    """Raised when an action is not allowed in the current phase."""


@dataclass
class PlacementSession:
    questions: List[NumberedQuestion]
    prep_seconds: int = DEFAULT_PREP_SECONDS
    record_seconds: int = DEFAULT_RECORD_SECONDS
    personal_info: PersonalInfo | None = None
    phase: SessionPhase = SessionPhase.COLLECTING_INFO
    current_index: int = -1
    responses: Dict[int, str] = field(default_factory=dict)
    blank_selections: Dict[int, Dict[int, str]] = field(default_factory=dict)
    timers: Dict[int, int] = field(default_factory=dict)
    prep_remaining: int | None = None
    record_remaining: int | None = None
    elapsed: int = 0
    submission_id: str | None = None

    @property
    def current(self) -> NumberedQuestion | None:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    def _require(self, *phases: SessionPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(phase.value for phase in phases)
            raise InvalidTransition(
                f"Not allowed in phase {self.phase.value} (expected {allowed})"
            )

    def start(self, info: PersonalInfo) -> list[SessionEvent]:
        """Begin the test once every personal-info field is filled in."""
        self._require(SessionPhase.COLLECTING_INFO)
        missing = [
            name
            for name, value in (
                ("fullName", info.full_name),
                ("email", info.email),
                ("phone", info.phone),
            )
            if not value
        ]
        if missing or not info.target:
            raise ValueError("Please fill in all personal information fields")
        if not self.questions:
            raise ValueError("No questions to answer")

        self.personal_info = info
        self.responses.clear()
        self.blank_selections.clear()
        self.timers.clear()
        self.current_index = 0
        return self._enter_question()

    def _enter_question(self) -> list[SessionEvent]:
        self.elapsed = 0
        self.prep_remaining = None
        self.record_remaining = None
        question = self.current
        if question is not None and question.question.type == QUESTION_TYPE_READ_ALOUD:
            self.phase = SessionPhase.PREPPING
            self.prep_remaining = self.prep_seconds
        else:
            self.phase = SessionPhase.ANSWERING
        return []

    def tick(self, seconds: int = 1) -> list[SessionEvent]:
        """Advance the clocks; expiring prep or record time changes phase."""
        self._require(
            SessionPhase.PREPPING, SessionPhase.RECORDING, SessionPhase.ANSWERING
        )
        events: list[SessionEvent] = []
        for _ in range(max(seconds, 0)):
            if self.phase == SessionPhase.PREPPING:
                self.prep_remaining = max((self.prep_remaining or 0) - 1, 0)
                if self.prep_remaining == 0:
                    events.extend(self._begin_recording())
            elif self.phase == SessionPhase.RECORDING:
                self.record_remaining = max((self.record_remaining or 0) - 1, 0)
                if self.record_remaining == 0:
                    events.extend(self._stop_recording())
            else:
                self.elapsed += 1
        return events

    def _begin_recording(self) -> list[SessionEvent]:
        self.phase = SessionPhase.RECORDING
        self.prep_remaining = None
        self.record_remaining = self.record_seconds
        return [SessionEvent.START_RECORDING]

    def _stop_recording(self) -> list[SessionEvent]:
        self.phase = SessionPhase.ANSWERING
        self.record_remaining = None
        return [SessionEvent.STOP_RECORDING]

    def answer(self, value: str) -> None:
        """Set the free-text answer (or recording reference) for the question."""
        self._require(SessionPhase.RECORDING, SessionPhase.ANSWERING)
        question = self.current
        if question is None:
            raise InvalidTransition("No current question")
        self.responses[question.number] = value

    def attach_recording(self, question_number: int, reference: str) -> None:
        """Store an uploaded recording; uploads may finish after ``next``.

        Only Read Aloud questions of this paper take recordings.
        """
        if self.phase == SessionPhase.DONE:
            raise InvalidTransition("Session already submitted")
        if not any(
            numbered.number == question_number
            and numbered.question.type == QUESTION_TYPE_READ_ALOUD
            for numbered in self.questions
        ) or question_number not in CATEGORY_RANGES[CATEGORY_READ_ALOUD]:
            raise ValueError(f"Question {question_number} does not take a recording")
        self.responses[question_number] = reference

    def choose_blank(self, index: int, value: str) -> None:
        """Put ``value`` into blank ``index`` of a fill-in-the-blank question.

        An option dropped into one blank is removed from any other blank of
        the same question.
        """
        self._require(SessionPhase.ANSWERING)
        question = self.current
        if question is None or question.question.type not in (
            QUESTION_TYPE_RWFIB,
            QUESTION_TYPE_RFIB,
        ):
            raise InvalidTransition("Current question has no blanks")
        selections = self.blank_selections.setdefault(question.number, {})
        for existing in [key for key, chosen in selections.items() if chosen == value]:
            del selections[existing]
        selections[index] = value
        self.responses[question.number] = format_blank_answers(selections)

    def next(self) -> list[SessionEvent]:
        """Leave the current question."""
        self._require(
            SessionPhase.PREPPING, SessionPhase.RECORDING, SessionPhase.ANSWERING
        )
        question = self.current
        events: list[SessionEvent] = []
        if self.phase == SessionPhase.RECORDING:
            events.extend(self._stop_recording())
        if question is not None:
            if question.question.type == QUESTION_TYPE_READ_ALOUD:
                self.timers[question.number] = self.record_seconds
            else:
                self.timers[question.number] = self.elapsed

        if self.is_last_question:
            self.phase = SessionPhase.SUBMITTING
            events.append(SessionEvent.SUBMIT)
            return events

        self.current_index += 1
        events.extend(self._enter_question())
        return events

    def build_submission(self) -> Submission:
        """Collect non-empty answers with their grading snapshots."""
        self._require(SessionPhase.SUBMITTING)
        assert self.personal_info is not None
        answers: dict[str, Answer] = {}
        for numbered in self.questions:
            response = self.responses.get(numbered.number)
            if not response:
                continue
            answers[str(numbered.number)] = build_answer(
                numbered, response, self.timers.get(numbered.number, 0)
            )
        return Submission(personal_info=self.personal_info, answers=answers)

    def mark_submitted(self, submission_id: str) -> None:
        self._require(SessionPhase.SUBMITTING)
        self.submission_id = submission_id
        self.phase = SessionPhase.DONE
        logger.info("Placement session submitted as %s", submission_id)

    def mark_submit_failed(self) -> None:
        """Return to the last question so the candidate can submit again."""
        self._require(SessionPhase.SUBMITTING)
        self.phase = SessionPhase.ANSWERING
        logger.warning("Submission failed; session returned to answering")
