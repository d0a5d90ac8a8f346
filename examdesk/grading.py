"""Grading of exam sessions: results, report cards and exam statistics."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from examdesk.exams import MCQ, ExamManager
from examdesk.sessions import ExamSession, SessionManager


class GradingError(Exception):
    """Raised when grading, loading or reporting fails."""


def _result_path(directory: str | Path, student_id: int, exam_id: int) -> Path:
    return Path(directory) / f"result_{student_id}_{exam_id}.json"


class Result(ABC):
    """The score one student obtained in one exam."""

    def __init__(self, student_id: int, exam_id: int, score: int, exam_type: str = "Standard") -> None:
        self.student_id = student_id
        self.exam_id = exam_id
        self.score = score
        self.exam_type = exam_type

    def update_score(self, new_score: int) -> None:
        if not 0 <= new_score <= 100:
            raise GradingError("Invalid score value")
        self.score = new_score

    @abstractmethod
    def describe(self) -> str:
        """The result as shown to a teacher."""

    def _summary(self) -> dict[str, Any]:
        """The fields a report card keeps for this result."""
        return {"examID": self.exam_id, "score": self.score, "examType": self.exam_type}

    def to_json(self) -> dict[str, Any]:
        return {
            "studentID": self.student_id,
            "examID": self.exam_id,
            "score": self.score,
            "examType": self.exam_type,
        }

    def save(self, directory: str | Path = ".") -> Path:
        """Write the result to result_<student>_<exam>.json in the directory."""
        path = _result_path(directory, self.student_id, self.exam_id)
        try:
            path.write_text(json.dumps(self.to_json(), indent=4), encoding="utf-8")
        except OSError as exc:
            raise GradingError("Failed to save result to file") from exc
        return path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (self.student_id, self.exam_id) == (other.student_id, other.exam_id)

    def __hash__(self) -> int:
        return hash((self.student_id, self.exam_id))

    def __str__(self) -> str:
        return self.describe()


class MCQResult(Result):
    """A multiple-choice result; the score is the percentage answered correctly."""

    def __init__(self, student_id: int, exam_id: int, correct_answers: int, total_questions: int) -> None:
        if total_questions <= 0:
            raise GradingError("Total questions must be positive")
        super().__init__(student_id, exam_id, (correct_answers * 100) // total_questions, "MCQ")
        self.correct_answers = correct_answers
        self.total_questions = total_questions

    def describe(self) -> str:
        return (
            f"MCQ Exam Result - Student ID: {self.student_id}, Exam ID: {self.exam_id}, "
            f"Score: {self.score}% ({self.correct_answers}/{self.total_questions})"
        )

    def _summary(self) -> dict[str, Any]:
        summary = super()._summary()
        if self.exam_type == "MCQ":
            summary["correctAnswers"] = self.correct_answers
            summary["totalQuestions"] = self.total_questions
        return summary

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        if self.exam_type == "MCQ":
            data["correctAnswers"] = self.correct_answers
            data["totalQuestions"] = self.total_questions
        return data


class DescriptiveResult(Result):
    """A descriptive result with teacher comments and per-question feedback."""

    def __init__(self, student_id: int, exam_id: int, score: int, comments: str = "") -> None:
        super().__init__(student_id, exam_id, score, "Descriptive")
        self.comments = comments
        self.detailed_feedback: dict[int, str] = {}

    def add_question_feedback(self, question_id: int, feedback: str) -> None:
        self.detailed_feedback[question_id] = feedback

    def describe(self) -> str:
        lines = [
            f"Descriptive Exam Result - Student ID: {self.student_id}, "
            f"Exam ID: {self.exam_id}, Score: {self.score}%",
            f"Teacher's Comments: {self.comments}",
        ]
        if self.detailed_feedback:
            lines.append("Question-wise Feedback:")
            lines.extend(
                f"Question {qid}: {feedback}" for qid, feedback in sorted(self.detailed_feedback.items())
            )
        return "\n".join(lines)

    def _summary(self) -> dict[str, Any]:
        summary = super()._summary()
        if self.exam_type == "Descriptive":
            summary["comments"] = self.comments
        return summary

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        if self.exam_type == "Descriptive":
            data["comments"] = self.comments
            data["detailedFeedback"] = {
                str(qid): feedback for qid, feedback in sorted(self.detailed_feedback.items())
            }
        return data


def load_result(student_id: int, exam_id: int, directory: str | Path = ".") -> Result:
    """Read a result saved by Result.save."""
    path = _result_path(directory, student_id, exam_id)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise GradingError("Failed to load result from file") from exc
    sid = int(data["studentID"])
    eid = int(data["examID"])
    score = int(data["score"])
    exam_type = str(data["examType"])
    result: Result
    if exam_type == "MCQ":
        total = int(data.get("totalQuestions", 1)) or 1
        result = MCQResult(sid, eid, int(data.get("correctAnswers", 0)), total)
    else:
        descriptive = DescriptiveResult(sid, eid, score, str(data.get("comments", "")))
        for key, feedback in (data.get("detailedFeedback") or {}).items():
            descriptive.add_question_feedback(int(key), feedback)
        result = descriptive
    result.score = score
    result.exam_type = exam_type
    return result


class ReportCard:
    """All results of one student together with their average score."""

    def __init__(self, student_id: int) -> None:
        self.student_id = student_id
        self.results: list[Result] = []
        self.average_score = 0.0

    def _recalculate(self) -> None:
        self.average_score = (
            sum(r.score for r in self.results) / len(self.results) if self.results else 0.0
        )

    def add_result(self, result: Result) -> None:
        self.results.append(result)
        self._recalculate()

    def generate(self, grading_system: GradingSystem) -> None:
        """Refill the card from the student's results in the grading system."""
        try:
            results = grading_system.student_results(self.student_id)
        except Exception as exc:
            raise GradingError(f"Failed to generate report: {exc}") from exc
        self.results = list(results)
        self._recalculate()

    def to_json(self) -> dict[str, Any]:
        return {
            "studentID": self.student_id,
            "averageScore": self.average_score,
            "results": [r._summary() for r in self.results],
        }

    def save(self, directory: str | Path = ".") -> Path:
        """Write the card to report_<student>.json in the directory."""
        path = Path(directory) / f"report_{self.student_id}.json"
        try:
            path.write_text(json.dumps(self.to_json(), indent=4), encoding="utf-8")
        except OSError as exc:
            raise GradingError("Failed to save report to file") from exc
        return path

    def describe(self) -> str:
        lines = [
            "--- Report Card ---",
            f"Student ID: {self.student_id}",
            f"Average Score: {self.average_score:g}%",
            "Exam Results:",
        ]
        lines.extend(r.describe() for r in self.results)
        return "\n".join(lines)


class GradingSystem:
    """Keeps every graded result and report card, by student id."""

    def __init__(self) -> None:
        self._results: dict[int, list[Result]] = {}
        self._report_cards: dict[int, ReportCard] = {}

    def grade_exam(self, result: Result) -> None:
        """Record a result, adding it to the student's report card if there is one."""
        self._results.setdefault(result.student_id, []).append(result)
        card = self._report_cards.get(result.student_id)
        if card is not None:
            card.add_result(result)

    def describe_grades(self) -> str:
        lines = ["--- All Grades ---"]
        for student_id, results in sorted(self._results.items()):
            lines.append(f"Student ID: {student_id}")
            lines.extend(r.describe() for r in results)
        return "\n".join(lines)

    def student_results(self, student_id: int) -> list[Result]:
        try:
            return list(self._results[student_id])
        except KeyError:
            raise GradingError("Student not found") from None

    def generate_report_card(self, student_id: int) -> ReportCard:
        card = self._report_cards.setdefault(student_id, ReportCard(student_id))
        card.generate(self)
        return card

    def report_card(self, student_id: int) -> ReportCard:
        try:
            return self._report_cards[student_id]
        except KeyError:
            raise GradingError("Report card not found") from None

    def clear(self) -> None:
        self._results.clear()
        self._report_cards.clear()


@dataclass(frozen=True)
class ExamStatistics:
    """Score statistics over every graded result of one exam."""

    exam_id: int
    subject: str
    student_count: int
    average_score: float
    highest_score: int
    lowest_score: int

    def describe(self) -> str:
        return "\n".join(
            [
                f"--- Exam Statistics for Exam ID {self.exam_id} ---",
                f"Subject: {self.subject}",
                f"Number of Students: {self.student_count}",
                f"Average Score: {self.average_score:g}%",
                f"Highest Score: {self.highest_score}%",
                f"Lowest Score: {self.lowest_score}%",
            ]
        )


class ExamGrader:
    """Grades exam sessions against their exams and produces reports."""

    def __init__(
        self,
        grading_system: GradingSystem,
        exam_manager: ExamManager,
        session_manager: SessionManager,
        directory: str | Path = ".",
    ) -> None:
        self.grading_system = grading_system
        self.exam_manager = exam_manager
        self.session_manager = session_manager
        self.directory = Path(directory)

    def grade_session(self, session: ExamSession | None) -> Result:
        """Grade one session, record the result and save it to a file."""
        if session is None:
            raise GradingError("Invalid exam session provided for grading")
        student_id, exam_id = session.student_id, session.exam_id
        answers = session.sheet.all_answers()

        exam = self.exam_manager.get_exam(exam_id)
        if exam is None:
            raise GradingError("Exam not found for grading")

        checks = exam.check_answers(answers)
        correct = sum(checks.values())
        total = len(checks)
        percent = (correct * 100) // total if total > 0 else 0

        questions = self.exam_manager.get_exam_questions(exam_id)
        result: Result
        if any(isinstance(q, MCQ) for q in questions):
            result = MCQResult(student_id, exam_id, correct, total)
        else:
            descriptive = DescriptiveResult(student_id, exam_id, percent)
            for question in questions:
                qid = question.question_id
                if qid in answers:
                    feedback = (
                        "Correct answer. Full points awarded."
                        if question.check_answer(answers[qid])
                        else f"Incorrect answer. Expected: {question.answer}"
                    )
                else:
                    feedback = "No answer provided."
                descriptive.add_question_feedback(qid, feedback)
            result = descriptive

        self.grading_system.grade_exam(result)
        result.save(self.directory)
        return result

    def grade_all_completed(self) -> tuple[list[Result], list[str]]:
        """Grade every finished session; return the results and the error messages."""
        graded: list[Result] = []
        errors: list[str] = []
        for session in self.session_manager.all_sessions():
            if not session.finished:
                continue
            try:
                graded.append(self.grade_session(session))
            except Exception as exc:
                errors.append(
                    f"Error grading session for student {session.student_id}, "
                    f"exam {session.exam_id}: {exc}"
                )
        return graded, errors

    def generate_all_report_cards(self) -> tuple[list[ReportCard], list[str]]:
        """Generate and save a report card for every student with a session."""
        student_ids = sorted({s.student_id for s in self.session_manager.all_sessions()})
        cards: list[ReportCard] = []
        errors: list[str] = []
        for student_id in student_ids:
            try:
                self.grading_system.generate_report_card(student_id)
                card = self.grading_system.report_card(student_id)
                card.save(self.directory)
                cards.append(card)
            except Exception as exc:
                errors.append(f"Error generating report for student {student_id}: {exc}")
        return cards, errors

    def student_report_card(self, student_id: int) -> ReportCard:
        try:
            return self.grading_system.report_card(student_id)
        except Exception as exc:
            raise GradingError(f"Could not retrieve report card: {exc}") from exc

    def exam_statistics(self, exam_id: int) -> ExamStatistics | None:
        """Statistics over the graded results of the exam's finished sessions."""
        scores: list[int] = []
        for session in self.session_manager.all_sessions():
            if session.exam_id != exam_id or not session.finished:
                continue
            try:
                results = self.grading_system.student_results(session.student_id)
            except GradingError:
                continue
            scores.extend(r.score for r in results if r.exam_id == exam_id)
        if not scores:
            return None
        return ExamStatistics(
            exam_id=exam_id,
            subject=self.exam_manager.get_exam_subject(exam_id),
            student_count=len(scores),
            average_score=sum(scores) / len(scores),
            highest_score=max([0, *scores]),
            lowest_score=min([100, *scores]),
        )