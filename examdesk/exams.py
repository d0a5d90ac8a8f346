"""Exams and their questions, with an exam manager persisted as JSON."""

from __future__ import annotations

import copy
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping


class ExamError(Exception):
    """Raised when an exam or question operation fails."""


@dataclass
class Question(ABC):
    """A question with a single correct answer."""

    question_id: int = 0
    text: str = ""
    answer: str = ""

    def check_answer(self, user_answer: str) -> bool:
        return user_answer == self.answer

    @abstractmethod
    def describe(self) -> str:
        """The question as shown to a candidate."""

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """The question as a JSON object."""


@dataclass
class MCQ(Question):
    """A multiple-choice question."""

    options: list[str] = field(default_factory=list)

    def describe(self) -> str:
        lines = [f"Q{self.question_id}: {self.text}"]
        lines.extend(f"{chr(ord('A') + i)}) {opt}" for i, opt in enumerate(self.options))
        return "\n".join(lines)

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "MCQ",
            "questionID": self.question_id,
            "questionText": self.text,
            "answer": self.answer,
            "options": list(self.options),
        }

    def __str__(self) -> str:
        return f"MCQ: {self.text} ({len(self.options)} options)"


@dataclass
class Descriptive(Question):
    """A question answered in free text."""

    def describe(self) -> str:
        return f"Q{self.question_id}: {self.text} [Descriptive]"

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "Descriptive",
            "questionID": self.question_id,
            "questionText": self.text,
            "answer": self.answer,
        }


def question_from_json(data: Mapping[str, Any]) -> Question:
    """Build an MCQ or descriptive question from its JSON object."""
    if data["type"] == "MCQ":
        return MCQ(data["questionID"], data["questionText"], data["answer"], list(data["options"]))
    return Descriptive(data["questionID"], data["questionText"], data["answer"])


@dataclass
class Exam:
    """An exam: a subject, a duration in minutes and a list of questions."""

    exam_id: int = 0
    subject: str = ""
    duration: int = 0
    questions: list[Question] = field(default_factory=list)

    def add_question(self, question: Question | None) -> None:
        if question is None:
            raise ExamError("No question passed to add_question()")
        self.questions.append(question)

    def remove_question(self, question_id: int) -> None:
        self.questions = [q for q in self.questions if q.question_id != question_id]

    def modify_question(self, question_id: int, new_text: str) -> None:
        for question in self.questions:
            if question.question_id == question_id:
                question.text = new_text
                return
        raise ExamError("Question ID not found")

    def copy_questions(self) -> list[Question]:
        """Independent copies of the questions."""
        return [copy.deepcopy(q) for q in self.questions]

    def check_answers(self, user_answers: Mapping[int, str]) -> dict[int, bool]:
        """Map each question id, in order, to whether it was answered correctly."""
        results = {
            q.question_id: (q.question_id in user_answers and q.check_answer(user_answers[q.question_id]))
            for q in self.questions
        }
        return dict(sorted(results.items()))

    def describe(self) -> str:
        header = f"Exam ID: {self.exam_id}, Subject: {self.subject}, Duration: {self.duration} mins"
        return "\n".join([header, *(q.describe() for q in self.questions)])

    def to_json(self) -> dict[str, Any]:
        return {
            "examID": self.exam_id,
            "subject": self.subject,
            "duration": self.duration,
            "questions": [q.to_json() for q in self.questions],
        }

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> Exam:
        return Exam(
            data["examID"],
            data["subject"],
            data["duration"],
            [question_from_json(q) for q in data["questions"]],
        )

    def __str__(self) -> str:
        return self.describe()


class ExamManager:
    """Creates and edits exams and stores them in a JSON file."""

    FIRST_EXAM_ID = 1000
    FIRST_QUESTION_ID = 1

    def __init__(self, path: str | Path = "exams.json") -> None:
        self.path = Path(path)
        self.exams: dict[int, Exam] = {}
        self.current_exam_id = self.FIRST_EXAM_ID
        self.current_question_id = self.FIRST_QUESTION_ID

    def _exam(self, exam_id: int) -> Exam:
        try:
            return self.exams[exam_id]
        except KeyError:
            raise ExamError("Exam ID not found in container") from None

    def _next_question_id(self) -> int:
        question_id = self.current_question_id
        self.current_question_id += 1
        return question_id

    def create_exam(self, subject: str, duration: int) -> int:
        exam_id = self.current_exam_id
        self.current_exam_id += 1
        self.exams.setdefault(exam_id, Exam(exam_id, subject, duration))
        return exam_id

    def add_question(
        self,
        exam_id: int,
        text: str,
        question_type: str,
        answer: str,
        options: Iterable[str] | None = None,
    ) -> int:
        """Add an MCQ when the type is "MCQ", otherwise a descriptive question."""
        exam = self._exam(exam_id)
        question_id = self._next_question_id()
        if question_type == "MCQ":
            exam.add_question(MCQ(question_id, text, answer, list(options or [])))
        else:
            exam.add_question(Descriptive(question_id, text, answer))
        return question_id

    def add_mcq_question(self, exam_id: int, text: str, answer: str, options: Iterable[str]) -> int:
        return self.add_question(exam_id, text, "MCQ", answer, options)

    def add_descriptive_question(self, exam_id: int, text: str, answer: str) -> int:
        return self.add_question(exam_id, text, "Descriptive", answer)

    def remove_question(self, exam_id: int, question_id: int) -> None:
        self._exam(exam_id).remove_question(question_id)

    def modify_question(self, exam_id: int, question_id: int, new_text: str) -> None:
        self._exam(exam_id).modify_question(question_id, new_text)

    def delete_exam(self, exam_id: int) -> None:
        self.exams.pop(exam_id, None)

    def get_exam(self, exam_id: int) -> Exam | None:
        return self.exams.get(exam_id)

    def get_exam_questions(self, exam_id: int) -> list[Question]:
        return self._exam(exam_id).copy_questions()

    def check_exam_answers(self, exam_id: int, user_answers: Mapping[int, str]) -> dict[int, bool]:
        return self._exam(exam_id).check_answers(user_answers)

    def get_exam_duration(self, exam_id: int) -> int:
        return self._exam(exam_id).duration

    def get_exam_subject(self, exam_id: int) -> str:
        return self._exam(exam_id).subject

    def describe_exam(self, exam_id: int) -> str:
        return self._exam(exam_id).describe()

    def describe_all_exams(self) -> str:
        return "\n\n".join(exam.describe() for exam in self.exams.values())

    def save(self) -> None:
        data = [exam.to_json() for exam in self.exams.values()]
        try:
            self.path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        except OSError as exc:
            raise ExamError(f"Unable to open {self.path.name} for writing") from exc

    def load(self) -> None:
        """Replace the exams with those in the file."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ExamError(f"Unable to open {self.path.name} for reading") from exc
        exams: dict[int, Exam] = {}
        for item in json.loads(text) or []:
            exam = Exam.from_json(item)
            exams.setdefault(exam.exam_id, exam)
        self.exams = exams
        if exams:
            self.current_exam_id = max(self.current_exam_id, max(exams) + 1)
        question_ids = [q.question_id for exam in exams.values() for q in exam.questions]
        if question_ids:
            self.current_question_id = max(self.current_question_id, max(question_ids) + 1)