"""Interactive console menus for users and exams."""

from __future__ import annotations

import sys
from typing import Callable, TextIO

from examdesk.exams import ExamError, ExamManager
from examdesk.users import Role, UserManager

_CLEAR_SCREEN = "\033[2J\033[1;1H"
_PHRASE_PROMPT = "Enter password: "


def role_allows(required_role: str, role: str | Role | None) -> bool:
    """Tell whether a user of the given role may enter an area needing required_role."""
    if role is None:
        return False
    name = role.value if isinstance(role, Role) else str(role)
    if required_role == "Any":
        return True
    if required_role == "Admin/Teacher":
        return name in (Role.ADMIN.value, Role.TEACHER.value)
    if required_role == Role.TEACHER.value:
        return name == Role.TEACHER.value
    if required_role == Role.STUDENT.value:
        return name == Role.STUDENT.value
    return False


class Console:
    """Menu-driven front end over the user and exam managers."""

    def __init__(
        self,
        users: UserManager,
        exams: ExamManager,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self.users = users
        self.exams = exams
        self.input_func = input_func
        self.output = output if output is not None else sys.stdout
        self.current_user_id: int | None = None
        self.current_role: str | None = None

    # -- input and output -------------------------------------------------

    def _say(self, text: str = "") -> None:
        print(text, file=self.output)

    def _clear(self) -> None:
        isatty = getattr(self.output, "isatty", None)
        if isatty is not None and isatty():
            self.output.write(_CLEAR_SCREEN)

    def _pause(self) -> None:
        self.read_line("\nPress Enter to continue...")

    def _reset_login(self) -> None:
        self.current_user_id = None
        self.current_role = None

    def read_line(self, prompt: str = "") -> str:
        return self.input_func(prompt)

    def read_int(self, prompt: str = "") -> int:
        """Ask until a whole number is entered."""
        while True:
            text = self.read_line(prompt).strip()
            try:
                return int(text)
            except ValueError:
                self._say("Please enter a whole number.")

    # -- login ------------------------------------------------------------

    def login_with_role_check(self, required_role: str) -> bool:
        """Make sure someone with a suitable role is logged in, asking if needed."""
        if self.current_user_id is not None and role_allows(required_role, self.current_role):
            return True

        self.users.load()
        self._say()
        self._say("Available users in the system:")
        for user in self.users.users:
            self._say(
                f"  User ID: {user.user_id}, Username: {user.username}, Role: {user.role.value}"
            )
        if not self.users.users:
            self._say("  [WARNING] No users found in the system! Please create a user first.")
        self._say()

        username = self.read_line("Enter username: ")
        phrase = self.read_line(_PHRASE_PROMPT)

        for user in self.users.users:
            if user.username != username or not user.verify_password(phrase):
                continue
            self.current_user_id = user.user_id
            self.current_role = user.role.value
            if not role_allows(required_role, self.current_role):
                self._say(f"Access denied. This module requires {required_role} privileges.")
                self._reset_login()
                return False
            if required_role in (Role.TEACHER.value, Role.STUDENT.value):
                self._say(f"Access granted. Welcome, {required_role} {username}!")
            else:
                self._say(f"Access granted. Welcome, {username}!")
            return True

        self._say("Invalid username or password.")
        return False

    def login(self) -> bool:
        if self.current_user_id is not None:
            self._say(
                f"You are already logged in as {self.current_role} (ID: {self.current_user_id})"
            )
            self._pause()
            return True
        granted = self.login_with_role_check("Any")
        self._pause()
        return granted

    def logout(self) -> None:
        if self.current_user_id is None:
            self._say("You are not logged in.")
        else:
            self._say("Logging out...")
            self._reset_login()
            self._say("Logged out successfully.")
        self._pause()

    # -- user management --------------------------------------------------

    def user_management_menu(self) -> None:
        self.users.load()
        while True:
            self._clear()
            self._say("=== USER MANAGEMENT ===")
            if self.current_user_id is not None:
                self._say(f"Logged in as: {self.current_role} (ID: {self.current_user_id})")
            else:
                self._say("No user logged in. You can create users before logging in.")
            self._say("1. Register User")
            self._say("2. Update User")
            self._say("3. Delete User")
            self._say("4. Display All Users")
            self._say("5. Back to Main Menu")
            choice = self.read_int("Enter your choice: ")

            if choice == 1:
                name = self.read_line("Enter name: ")
                role = self.read_line("Enter role (Admin/Teacher/Student): ")
                username = self.read_line("Enter username: ")
                phrase = self.read_line(_PHRASE_PROMPT)
                self.users.register_user(name, role, username, phrase)
                self.users.save()
                self._say("User registered successfully.")
            elif choice == 2:
                user_id = self.read_int("Enter User ID to update: ")
                new_name = self.read_line("Enter new name: ")
                try:
                    self.users.update_user(user_id, new_name)
                    self._say("User name updated.")
                except KeyError:
                    self._say("User not found.")
                self.users.save()
            elif choice == 3:
                user_id = self.read_int("Enter User ID to delete: ")
                self.users.delete_user(user_id)
                self.users.save()
                self._say("User deleted.")
            elif choice == 4:
                for line in self.users.describe_users():
                    self._say(line)
            elif choice == 5:
                self.users.save()
                return
            else:
                self._say("Invalid choice. Try again.")
            self._pause()

    # -- exam management --------------------------------------------------

    def _load_exams(self) -> None:
        try:
            self.exams.load()
        except ExamError as exc:
            self._say(f"Warning: {exc}")

    def _save_exams(self) -> None:
        try:
            self.exams.save()
        except ExamError as exc:
            self._say(f"Error: {exc}")

    def _add_question_interactively(self) -> None:
        exam_id = self.read_int("Enter Exam ID: ")
        text = self.read_line("Enter question text: ")
        question_type = self.read_line("Enter question type (MCQ/Descriptive): ")
        answer = self.read_line("Enter correct answer: ")
        if self.exams.get_exam(exam_id) is None:
            self._say("Error: Exam ID not found in container")
            return
        options: list[str] = []
        if question_type == "MCQ":
            self._say("Enter 4 options:")
            options = [self.read_line(f"Option {letter}: ") for letter in "ABCD"]
        question_id = self.exams.add_question(exam_id, text, question_type, answer, options)
        self._say(f"Question added with ID: {question_id}")
        self._save_exams()

    def exam_management_menu(self) -> None:
        self._load_exams()
        if not self.login_with_role_check("Admin/Teacher"):
            self._pause()
            return

        while True:
            self._clear()
            self._say("=== EXAM MANAGEMENT ===")
            self._say(f"Logged in as: {self.current_role} (ID: {self.current_user_id})")
            self._say("1. Create Exam")
            self._say("2. Add Question to Exam")
            self._say("3. Modify Question")
            self._say("4. Remove Question")
            self._say("5. Delete Exam")
            self._say("6. Display Exam")
            self._say("7. Display All Exams")
            self._say("8. Back to Main Menu")
            choice = self.read_int("Enter your choice: ")

            try:
                if choice == 1:
                    subject = self.read_line("Enter subject: ")
                    duration = self.read_int("Enter duration (minutes): ")
                    exam_id = self.exams.create_exam(subject, duration)
                    self._say(f"Exam created with ID: {exam_id}")
                    self._save_exams()
                elif choice == 2:
                    self._add_question_interactively()
                elif choice == 3:
                    exam_id = self.read_int("Enter Exam ID: ")
                    question_id = self.read_int("Enter Question ID: ")
                    new_text = self.read_line("Enter new question text: ")
                    self.exams.modify_question(exam_id, question_id, new_text)
                    self._save_exams()
                elif choice == 4:
                    exam_id = self.read_int("Enter Exam ID: ")
                    question_id = self.read_int("Enter Question ID: ")
                    self.exams.remove_question(exam_id, question_id)
                    self._save_exams()
                elif choice == 5:
                    exam_id = self.read_int("Enter Exam ID to delete: ")
                    self.exams.delete_exam(exam_id)
                    self._save_exams()
                elif choice == 6:
                    exam_id = self.read_int("Enter Exam ID to display: ")
                    self._say(self.exams.describe_exam(exam_id))
                elif choice == 7:
                    self._say(self.exams.describe_all_exams())
                elif choice == 8:
                    self._save_exams()
                    self._reset_login()
                    return
                else:
                    self._say("Invalid choice. Try again.")
            except ExamError as exc:
                self._say(f"Error: {exc}")
            self._pause()