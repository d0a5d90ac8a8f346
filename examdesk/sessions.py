"""Exam sessions: timers, answer sheets and per-student session files."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from examdesk.exams import ExamError, ExamManager, Question


class Timer:
    """A countdown measured in whole minutes that can be paused and resumed."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._duration_seconds = 0.0
        self._start = 0.0
        self._paused_at: float | None = None
        self.running = False

    def start(self, duration_minutes: int) -> None:
        self._duration_seconds = duration_minutes * 60.0
        self._start = self._clock()
        self._paused_at = None
        self.running = True

    def remaining_minutes(self) -> int:
        """Whole minutes left; zero when the timer is not running."""
        if not self.running:
            return 0
        elapsed_minutes = int((self._clock() - self._start) // 60)
        remaining = int(self._duration_seconds // 60) - elapsed_minutes
        return max(remaining, 0)

    def pause(self) -> None:
        if self.running:
            self._paused_at = self._clock()
            self.running = False

    def resume(self) -> None:
        if not self.running and self._paused_at is not None:
            self._start += self._clock() - self._paused_at
            self._paused_at = None
            self.running = True


@dataclass
class AnswerSheet:
    """The answers one student gave in one exam, keyed by question id."""

    student_id: int
    exam_id: int
    answers: dict[int, str] = field(default_factory=dict)

    def add_answer(self, question_id: int, answer: str) -> None:
        self.answers[question_id] = answer

    def get_answer(self, question_id: int) -> str:
        """The stored answer, or an empty string when there is none."""
        return self.answers.get(question_id, "")

    def update_answer(self, question_id: int, new_answer: str) -> None:
        """Replace an existing answer; unknown questions are left alone."""
        if question_id in self.answers:
            self.answers[question_id] = new_answer

    def remove_answer(self, question_id: int) -> None:
        self.answers.pop(question_id, None)

    def all_answers(self) -> dict[int, str]:
        """A copy of the answers ordered by question id."""
        return dict(sorted(self.answers.items()))


class ExamSession:
    """One student's attempt at one exam."""

    def __init__(
        self,
        exam_manager: ExamManager,
        student_id: int = 0,
        exam_id: int = 0,
        directory: str | Path = ".",
    ) -> None:
        self.exam_manager = exam_manager
        self.student_id = student_id
        self.exam_id = exam_id
        self.directory = Path(directory)
        self.sheet = AnswerSheet(student_id, exam_id)
        self.timer = Timer()
        self.finished = False
        self.questions: list[Question] = self._load_questions()

    def _load_questions(self) -> list[Question]:
        exam = self.exam_manager.get_exam(self.exam_id)
        return exam.copy_questions() if exam is not None else []

    @property
    def path(self) -> Path:
        return self.directory / f"session_{self.student_id}_{self.exam_id}.json"

    def start_exam(self, student_id: int, exam_id: int) -> int:
        """Assign the session, load its questions and start the timer.

        Returns the exam's duration in minutes.
        """
        if (self.student_id, self.exam_id) not in {(0, 0), (student_id, exam_id)}:
            raise ExamError("This session is already assigned to a student or exam.")
        self.student_id = student_id
        self.exam_id = exam_id
        if (self.sheet.student_id, self.sheet.exam_id) != (student_id, exam_id):
            self.sheet = AnswerSheet(student_id, exam_id)
        duration = self.exam_manager.get_exam_duration(exam_id)
        self.questions = self.exam_manager.get_exam_questions(exam_id)
        self.timer.start(duration)
        return duration

    def submit_answer(self, question_id: int, answer: str) -> None:
        if self.finished:
            raise ExamError("Cannot submit answer: Exam is already finished.")
        self.sheet.add_answer(question_id, answer)

    def finish_exam(self) -> bool:
        """Finish and save the session; False if it was already finished."""
        if self.finished:
            return False
        self.finished = True
        self.timer.pause()
        self.save()
        return True

    def remaining_time(self) -> int:
        return self.timer.remaining_minutes()

    def describe_questions(self) -> str:
        lines = ["--- Exam Questions ---"]
        for question in self.questions:
            lines.append(question.describe())
            current = self.sheet.get_answer(question.question_id)
            if current:
                lines.append(f"Your current answer: {current}")
            lines.append("------------------------")
        return "\n".join(lines)

    def describe_results(self) -> str:
        lines = [f"--- Exam Results for Student {self.student_id} ---"]
        answers = self.sheet.all_answers()
        for question in self.questions:
            qid = question.question_id
            lines.append(f"Question {qid}: {question.text}")
            if qid in answers:
                given = answers[qid]
                lines.append(f"Your answer: {given}")
                lines.append(f"Correct answer: {question.answer}")
                verdict = "Correct" if question.check_answer(given) else "Incorrect"
                lines.append(f"Result: {verdict}")
            else:
                lines.append("No answer provided")
            lines.append("------------------------")
        return "\n".join(lines)

    def save(self) -> Path:
        data = {
            "studentID": self.student_id,
            "examID": self.exam_id,
            "isFinished": self.finished,
            "answers": {str(k): v for k, v in self.sheet.all_answers().items()},
        }
        path = self.path
        path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        return path

    def load(self, student_id: int, exam_id: int) -> bool:
        """Load the session's file; without one, start a fresh session.

        Returns whether a file was read.
        """
        path = self.directory / f"session_{student_id}_{exam_id}.json"
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self.student_id = student_id
            self.exam_id = exam_id
            if (self.sheet.student_id, self.sheet.exam_id) != (student_id, exam_id):
                self.sheet = AnswerSheet(student_id, exam_id)
            self.questions = self._load_questions()
            return False
        data = json.loads(text)
        self.student_id = int(data["studentID"])
        self.exam_id = int(data["examID"])
        self.finished = bool(data["isFinished"])
        if (self.sheet.student_id, self.sheet.exam_id) != (self.student_id, self.exam_id):
            self.sheet = AnswerSheet(self.student_id, self.exam_id)
        for key, answer in (data.get("answers") or {}).items():
            self.sheet.add_answer(int(key), answer)
        self.questions = self._load_questions()
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExamSession):
            return NotImplemented
        return (self.student_id, self.exam_id) == (other.student_id, other.exam_id)

    def __hash__(self) -> int:
        return hash((self.student_id, self.exam_id))

    def __str__(self) -> str:
        state = "Finished" if self.finished else "In Progress"
        return (
            f"Student ID: {self.student_id}, Exam ID: {self.exam_id} ({state})\n"
            f"Questions answered: {len(self.sheet.answers)}"
        )


class SessionManager:
    """Keeps the open exam sessions and finds saved ones on disk."""

    def __init__(self, exam_manager: ExamManager, directory: str | Path = ".") -> None:
        self.exam_manager = exam_manager
        self.directory = Path(directory)
        self._sessions: list[ExamSession] = []

    def _find(self, student_id: int, exam_id: int) -> ExamSession | None:
        return next(
            (
                s
                for s in self._sessions
                if s.student_id == student_id and s.exam_id == exam_id
            ),
            None,
        )

    def start_session(self, student_id: int, exam_id: int) -> ExamSession:
        if self._find(student_id, exam_id) is not None:
            raise ExamError(
                f"Session already exists for student {student_id} and exam {exam_id}"
            )
        session = ExamSession(self.exam_manager, student_id, exam_id, self.directory)
        session.start_exam(student_id, exam_id)
        self._sessions.append(session)
        return session

    def end_session(self, student_id: int, exam_id: int) -> bool:
        """Finish the session; False if it was already finished."""
        session = self._find(student_id, exam_id)
        if session is None:
            raise ExamError(
                f"No active session found for student {student_id} and exam {exam_id}"
            )
        return session.finish_exam()

    def get_session(self, student_id: int, exam_id: int) -> ExamSession | None:
        """An open session, else one loaded from (or started for) its file."""
        session = self._find(student_id, exam_id)
        if session is not None:
            return session
        session = ExamSession(self.exam_manager, directory=self.directory)
        session.load(student_id, exam_id)
        if session.student_id == student_id and session.exam_id == exam_id:
            self._sessions.append(session)
            return session
        return None

    def save_all_sessions(self) -> None:
        for session in self._sessions:
            session.save()

    def session_exists(self, student_id: int, exam_id: int) -> bool:
        return self._find(student_id, exam_id) is not None

    def describe_sessions(self) -> str:
        if not self._sessions:
            return "No active sessions."
        return "\n".join(str(session) for session in self._sessions)

    def all_sessions(self) -> list[ExamSession]:
        return list(self._sessions)