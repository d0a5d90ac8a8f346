"""The full interactive exam desk: sessions, grading, reminders and the main menu."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, TextIO

from examdesk.console import Console
from examdesk.exams import ExamError, ExamManager
from examdesk.grading import ExamGrader, GradingError, GradingSystem, Result
from examdesk.reminders import (
    Deadline,
    PriorityReminder,
    Reminder,
    ReminderError,
    ReminderManager,
)
from examdesk.sessions import SessionManager
from examdesk.users import UserManager


class Application(Console):
    """The whole system behind one main menu, with its data kept in a directory."""

    def __init__(
        self,
        directory: str | Path = ".",
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        super().__init__(
            UserManager(self.directory / "users.json"),
            ExamManager(self.directory / "exams.json"),
            input_func,
            output,
        )
        self.sessions = SessionManager(self.exams, self.directory)
        self.grading_system = GradingSystem()
        self.grader = ExamGrader(self.grading_system, self.exams, self.sessions, self.directory)
        self.reminders = ReminderManager(self.directory / "reminders.json")

    # -- helpers ----------------------------------------------------------

    def _ask_session_ids(self) -> tuple[int, int]:
        student_id = self.read_int("Enter Student ID: ")
        exam_id = self.read_int("Enter Exam ID: ")
        return student_id, exam_id

    def _load_reminders(self) -> None:
        try:
            self.reminders.load()
        except ReminderError as exc:
            self._say(f"Warning: {exc}")
            self._say("Starting with empty reminders.")

    def _save_reminders(self) -> None:
        try:
            self.reminders.save()
        except ReminderError as exc:
            self._say(f"Error saving reminders: {exc}")

    def _report_graded(self, result: Result) -> None:
        self._say(f"Exam graded for student ID: {result.student_id}")
        self._say(f"Exam graded successfully. Score: {result.score}%")

    # -- exam sessions ----------------------------------------------------

    def exam_session_menu(self) -> None:
        self._load_exams()
        if not self.login_with_role_check("Student"):
            self._pause()
            return

        while True:
            self._clear()
            self._say("=== EXAM SESSION ===")
            self._say("1. Start Exam Session")
            self._say("2. Submit Answer")
            self._say("3. View Remaining Time")
            self._say("4. View Exam Questions")
            self._say("5. Finish Exam")
            self._say("6. View Exam Results")
            self._say("7. Display Active Sessions")
            self._say("8. Back to Main Menu")
            choice = self.read_int("Enter your choice: ")

            try:
                if choice == 1:
                    student_id, exam_id = self._ask_session_ids()
                    session = self.sessions.start_session(student_id, exam_id)
                    self._say(
                        f"Exam started for student {student_id} with exam ID {exam_id} "
                        f"(Duration: {session.exam_manager.get_exam_duration(exam_id)} minutes)"
                    )
                elif choice == 2:
                    student_id, exam_id = self._ask_session_ids()
                    question_id = self.read_int("Enter Question ID: ")
                    answer = self.read_line("Enter your answer: ")
                    session = self.sessions.get_session(student_id, exam_id)
                    if session is None:
                        self._say("Session not found!")
                    else:
                        session.submit_answer(question_id, answer)
                        self._say(f"Answer submitted for question {question_id}")
                elif choice == 3:
                    session = self.sessions.get_session(*self._ask_session_ids())
                    if session is None:
                        self._say("Session not found!")
                    else:
                        self._say(f"Remaining time: {session.remaining_time()} minutes")
                elif choice == 4:
                    session = self.sessions.get_session(*self._ask_session_ids())
                    if session is None:
                        self._say("Session not found!")
                    else:
                        self._say(session.describe_questions())
                elif choice == 5:
                    student_id, exam_id = self._ask_session_ids()
                    if self.sessions.end_session(student_id, exam_id):
                        self._say(f"Exam finished for student {student_id}")
                    else:
                        self._say("Exam is already finished.")
                elif choice == 6:
                    session = self.sessions.get_session(*self._ask_session_ids())
                    if session is None:
                        self._say("Session not found!")
                    else:
                        self._say(session.describe_results())
                elif choice == 7:
                    self._say("--- Active Exam Sessions ---")
                    self._say(self.sessions.describe_sessions())
                elif choice == 8:
                    self.sessions.save_all_sessions()
                    self._say("All sessions saved.")
                    return
                else:
                    self._say("Invalid choice. Try again.")
            except ExamError as exc:
                self._say(str(exc))
            self._pause()

    # -- grading ----------------------------------------------------------

    def grading_menu(self) -> None:
        if not self.login_with_role_check("Teacher"):
            self._pause()
            return

        while True:
            self._clear()
            self._say("=== GRADING SYSTEM ===")
            self._say(f"Logged in as: Teacher (ID: {self.current_user_id})")
            self._say("1. Grade Exam Session")
            self._say("2. Grade All Completed Sessions")
            self._say("3. View All Grades")
            self._say("4. View Student Grades")
            self._say("5. Generate Report Card")
            self._say("6. View Report Card")
            self._say("7. View Exam Statistics")
            self._say("8. Back to Main Menu")
            choice = self.read_int("Enter your choice: ")

            try:
                if choice == 1:
                    session = self.sessions.get_session(*self._ask_session_ids())
                    if session is None:
                        self._say("Session not found!")
                    else:
                        self._report_graded(self.grader.grade_session(session))
                elif choice == 2:
                    graded, errors = self.grader.grade_all_completed()
                    for result in graded:
                        self._report_graded(result)
                    for error in errors:
                        self._say(error)
                    self._say(f"Graded {len(graded)} completed exam sessions.")
                elif choice == 3:
                    self._say(self.grading_system.describe_grades())
                elif choice == 4:
                    student_id = self.read_int("Enter Student ID: ")
                    results = self.grading_system.student_results(student_id)
                    self._say(f"--- Grades for Student {student_id} ---")
                    for result in results:
                        self._say(result.describe())
                elif choice == 5:
                    student_id = self.read_int("Enter Student ID: ")
                    card = self.grading_system.generate_report_card(student_id)
                    card.save(self.directory)
                    self._say("Report card generated successfully.")
                elif choice == 6:
                    student_id = self.read_int("Enter Student ID: ")
                    self._say(self.grader.student_report_card(student_id).describe())
                elif choice == 7:
                    exam_id = self.read_int("Enter Exam ID: ")
                    statistics = self.grader.exam_statistics(exam_id)
                    if statistics is None:
                        self._say(f"No results found for exam ID {exam_id}")
                    else:
                        self._say(statistics.describe())
                elif choice == 8:
                    return
                else:
                    self._say("Invalid choice. Try again.")
            except (GradingError, ExamError) as exc:
                self._say(f"Error: {exc}")
            self._pause()

    # -- reminders --------------------------------------------------------

    def reminder_menu(self) -> None:
        if not self.login_with_role_check("Student"):
            self._pause()
            return
        self._load_reminders()

        while True:
            self._clear()
            self._say("=== REMINDER MANAGEMENT ===")
            self._say(f"Logged in as: Student (ID: {self.current_user_id})")
            self._say("1. Add Regular Reminder")
            self._say("2. Add Priority Reminder")
            self._say("3. Send All Reminders")
            self._say("4. Display All Reminders")
            self._say("5. Display Activity Log")
            self._say("6. Back to Main Menu")
            choice = self.read_int("Enter your choice: ")

            try:
                if choice in (1, 2):
                    reminder_id = self.read_int("Enter Reminder ID: ")
                    exam_id = self.read_int("Enter Exam ID: ")
                    due_date = self.read_line("Enter Due Date (YYYY-MM-DD): ")
                    message = self.read_line("Enter Message: ")
                    if choice == 1:
                        reminder = Reminder(reminder_id, message, Deadline(due_date, exam_id))
                        self.reminders.add_reminder(reminder)
                        self._say("Regular reminder added successfully.")
                    else:
                        priority = self.read_int("Enter Priority (1-5): ")
                        reminder = PriorityReminder(
                            reminder_id, message, Deadline(due_date, exam_id), priority
                        )
                        self.reminders.add_reminder(reminder)
                        self._say("Priority reminder added successfully.")
                elif choice == 3:
                    for reminder in self.reminders.send_reminders():
                        self._say(f"SENDING: {reminder.describe()}")
                    self._say("All reminders sent successfully.")
                elif choice == 4:
                    self._say(self.reminders.describe_all())
                elif choice == 5:
                    for line in self.reminders.activity_lines():
                        self._say(line)
                elif choice == 6:
                    self._save_reminders()
                    self._reset_login()
                    return
                else:
                    self._say("Invalid choice. Try again.")
            except ReminderError as exc:
                self._say(f"Error: {exc}")
            self._pause()

    # -- main menu --------------------------------------------------------

    def save_all(self) -> None:
        """Write users, exams, sessions and reminders to their files."""
        self.users.save()
        self._save_exams()
        self.sessions.save_all_sessions()
        self._save_reminders()
        self._say("All data saved. Exiting...")

    def run(self) -> int:
        """Load the stored data and show the main menu until Exit is chosen."""
        self.users.load()
        self._load_exams()
        self._load_reminders()

        while True:
            self._clear()
            self._say("=== EXAM MANAGEMENT SYSTEM ===")
            if self.current_user_id is not None:
                self._say(f"Logged in as: {self.current_role} (ID: {self.current_user_id})")
            else:
                self._say("No user logged in")
            self._say("1. User Management (Available to everyone)")
            self._say("2. Login")
            self._say("3. Logout")
            self._say("4. Exam Management (Admin/Teacher)")
            self._say("5. Exam Session (Student)")
            self._say("6. Grading System (Teacher)")
            self._say("7. Reminder Management (Student)")
            self._say("8. Exit")
            choice = self.read_int("Enter your choice: ")

            actions = {
                1: self.user_management_menu,
                2: self.login,
                3: self.logout,
                4: self.exam_management_menu,
                5: self.exam_session_menu,
                6: self.grading_menu,
                7: self.reminder_menu,
            }
            if choice == 8:
                self.save_all()
                return 0
            action = actions.get(choice)
            if action is None:
                self._say("Invalid choice. Try again.")
                self._pause()
            else:
                action()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="examdesk", description="Interactive exam desk.")
    parser.add_argument(
        "--dir",
        dest="directory",
        default=".",
        help="directory holding the data files (default: current directory)",
    )
    args = parser.parse_args(argv)
    app = Application(args.directory)
    try:
        return app.run()
    except EOFError:
        print(file=sys.stdout)
        return 1
    except KeyboardInterrupt:
        print(file=sys.stdout)
        return 130


if __name__ == "__main__":
    sys.exit(main())