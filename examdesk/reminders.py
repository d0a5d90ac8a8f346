"""Exam reminders with deadlines and priorities, kept in a JSON file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping


class ReminderError(Exception):
    """Raised when a reminder cannot be built, stored or sent."""


class ActivityLog:
    """An ordered record of what the reminder manager has done."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def add(self, entry: str) -> None:
        self._entries.append(entry)

    def lines(self) -> list[str]:
        """The entries as display lines; raises when the log is empty."""
        if not self._entries:
            raise ReminderError("No logs available")
        return [f"LOG: {entry}" for entry in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))


class Deadline:
    """The due date of a reminder and the exam it belongs to."""

    def __init__(self, due_date: str, exam_id: int) -> None:
        if not due_date or exam_id <= 0:
            raise ReminderError("Invalid deadline parameters")
        self.due_date = due_date
        self.exam_id = exam_id

    def to_json(self) -> dict[str, Any]:
        return {"dueDate": self.due_date, "examID": self.exam_id}


class Reminder:
    """A message to send a student before an exam deadline."""

    def __init__(self, reminder_id: int, message: str, deadline: Deadline | None) -> None:
        if reminder_id <= 0 or not message or deadline is None:
            raise ReminderError("Invalid reminder parameters")
        self.reminder_id = reminder_id
        self.message = message
        self.deadline = deadline
        self.is_sent = False

    def describe(self) -> str:
        return f"[{self.reminder_id}] {self.message} (Due: {self.deadline.due_date})"

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.reminder_id,
            "message": self.message,
            "deadline": self.deadline.to_json(),
            "isSent": self.is_sent,
        }

    def __str__(self) -> str:
        return self.describe()


class PriorityReminder(Reminder):
    """A reminder carrying a priority from 1 to 5."""

    def __init__(
        self, reminder_id: int, message: str, deadline: Deadline | None, priority: int
    ) -> None:
        super().__init__(reminder_id, message, deadline)
        if not 1 <= priority <= 5:
            raise ReminderError("Priority must be 1-5")
        self.priority = priority

    def describe(self) -> str:
        return f"{super().describe()} [PRIORITY: {self.priority}/5]"

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data["priority"] = self.priority
        return data


def reminder_from_json(data: Mapping[str, Any]) -> Reminder:
    """Build a reminder, or a priority reminder, from its JSON object."""
    try:
        deadline = Deadline(data["deadline"]["dueDate"], int(data["deadline"]["examID"]))
        if "priority" in data:
            return PriorityReminder(
                int(data["id"]), data["message"], deadline, int(data["priority"])
            )
        return Reminder(int(data["id"]), data["message"], deadline)
    except (KeyError, TypeError, ValueError) as exc:
        raise ReminderError(f"Malformed reminder: {exc}") from exc


class ReminderManager:
    """Holds reminders, sends them and keeps an activity log."""

    def __init__(self, path: str | Path = "reminders.json") -> None:
        self.path = Path(path)
        self.reminders: list[Reminder] = []
        self.sent_status: dict[int, bool] = {}
        self.log = ActivityLog()

    def add_reminder(self, reminder: Reminder | None) -> None:
        if reminder is None:
            raise ReminderError("Cannot add null reminder")
        self.reminders.append(reminder)
        self.log.add(f"Added regular reminder ID: {reminder.reminder_id}")

    def add_priority_reminder(self, reminder: Reminder | None) -> None:
        """Put a priority reminder at the front of the queue."""
        try:
            if reminder is None:
                raise ReminderError("Null reminder")
            if not isinstance(reminder, PriorityReminder):
                raise ReminderError("Invalid priority reminder cast")
        except ReminderError as exc:
            self.log.add(f"Error: {exc}")
            raise
        self.reminders.insert(0, reminder)
        self.log.add(f"Added PRIORITY reminder ID: {reminder.reminder_id}")

    def send_reminders(self) -> list[Reminder]:
        """Send every unsent reminder and return those sent."""
        if not self.reminders:
            raise ReminderError("No reminders to send")
        sent = []
        for reminder in self.reminders:
            if reminder.is_sent:
                continue
            reminder.is_sent = True
            self.sent_status[reminder.reminder_id] = True
            self.log.add(f"Sent reminder ID: {reminder.reminder_id}")
            sent.append(reminder)
        return sent

    def save(self) -> None:
        data = [r.to_json() for r in self.reminders]
        try:
            self.path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        except OSError as exc:
            message = f"Failed to open file: {self.path}"
            self.log.add(f"Save failed: {message}")
            raise ReminderError(message) from exc
        self.log.add(f"Saved reminders to {self.path}")

    def load(self) -> None:
        """Replace the reminders with the file's; a missing file is created empty."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            try:
                self.path.write_text("[]", encoding="utf-8")
            except OSError as exc:
                message = f"Failed to create file: {self.path}"
                self.log.add(f"Load failed: {message}")
                raise ReminderError(message) from exc
            self.log.add(f"Created new empty reminders file: {self.path}")
            return
        try:
            data = json.loads(text)
        except ValueError as exc:
            self.log.add(f"Load failed: {exc}")
            raise ReminderError(f"Failed to parse {self.path}: {exc}") from exc

        self.reminders = []
        for item in data or []:
            try:
                self.reminders.append(reminder_from_json(item))
            except ReminderError:
                self.log.add("Warning: Failed to parse reminder from JSON")
        self.log.add(f"Loaded reminders from {self.path}")

    def describe_all(self) -> str:
        if not self.reminders:
            return "No reminders available"
        return "\n".join(r.describe() for r in self.reminders)

    def activity_lines(self) -> list[str]:
        return self.log.lines()

    def clear_all(self) -> None:
        self.reminders.clear()
        self.sent_status.clear()
        self.log.clear()