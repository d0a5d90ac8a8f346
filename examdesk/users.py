"""User accounts: roles, authentication and JSON persistence."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar


class Role(str, Enum):
    """The roles a user account can hold."""

    ADMIN = "Admin"
    TEACHER = "Teacher"
    STUDENT = "Student"

    @classmethod
    def parse(cls, value: str) -> Role:
        """Return the matching role; anything unknown counts as a student."""
        try:
            return cls(value)
        except ValueError:
            return cls.STUDENT


class User:
    """A user account with a unique, automatically assigned id."""

    _next_id: ClassVar[int] = 1
    _tag: ClassVar[str] = ""

    def __init__(self, name: str, role: Role | str, username: str, password: str) -> None:
        self.name = name
        self.role = Role(role)
        self.username = username
        self._password = password
        self.user_id = User._next_id
        User._next_id += 1

    def verify_password(self, entered: str) -> bool:
        """Tell whether the entered password matches."""
        return self._password == entered

    def describe(self) -> str:
        """One line with the account's details."""
        details = (
            f"UserID: {self.user_id}, Name: {self.name}, "
            f"Role: {self.role.value}, Username: {self.username}"
        )
        return f"{self._tag} {details}" if self._tag else details

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "username": self.username,
            "password": self._password,
        }

    @staticmethod
    def from_json(data: dict[str, Any]) -> User:
        """Rebuild a user of the right kind, keeping its stored id."""
        user = create_user(data["name"], data["role"], data["username"], data["password"])
        user_id = int(data["id"])
        user.user_id = user_id
        if user_id >= User._next_id:
            User._next_id = user_id + 1
        return user

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash(self.user_id)

    def __str__(self) -> str:
        return f"[{self.user_id}] {self.role.value} - {self.name} ({self.username})"


class Admin(User):
    _tag = "[Admin]"

    def __init__(self, name: str, username: str, password: str) -> None:
        super().__init__(name, Role.ADMIN, username, password)


class Teacher(User):
    _tag = "[Teacher]"

    def __init__(self, name: str, username: str, password: str) -> None:
        super().__init__(name, Role.TEACHER, username, password)


class Student(User):
    _tag = "[Student]"

    def __init__(self, name: str, username: str, password: str) -> None:
        super().__init__(name, Role.STUDENT, username, password)


_USER_CLASSES: dict[Role, type] = {
    Role.ADMIN: Admin,
    Role.TEACHER: Teacher,
    Role.STUDENT: Student,
}


def create_user(name: str, role: str, username: str, password: str) -> User:
    """Create a user of the class matching the role name."""
    return _USER_CLASSES[Role.parse(role)](name, username, password)


class UserManager:
    """Holds the registered users and stores them in a JSON file."""

    def __init__(self, path: str | Path = "users.json") -> None:
        self.path = Path(path)
        self.users: list[User] = []

    def register_user(self, name: str, role: str, username: str, password: str) -> User:
        user = create_user(name, role, username, password)
        self.users.append(user)
        return user

    def login_user(self, username: str, password: str) -> User | None:
        """Return the user matching the credentials, or None."""
        return next(
            (u for u in self.users if u.username == username and u.verify_password(password)),
            None,
        )

    def delete_user(self, user_id: int) -> bool:
        """Remove every user with the id; tell whether any was removed."""
        kept = [u for u in self.users if u.user_id != user_id]
        removed = len(kept) != len(self.users)
        self.users = kept
        return removed

    def find_user(self, user_id: int) -> User | None:
        return next((u for u in self.users if u.user_id == user_id), None)

    def update_user(self, user_id: int, new_name: str) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise KeyError(f"User not found: {user_id}")
        user.name = new_name
        return user

    def describe_users(self, user_id: int | None = None) -> list[str]:
        """Describe all users, or the one with the given id."""
        if user_id is None:
            return [u.describe() for u in self.users]
        user = self.find_user(user_id)
        if user is None:
            raise KeyError(f"User not found: {user_id}")
        return [user.describe()]

    def save(self) -> None:
        self.path.write_text(
            json.dumps([u.to_json() for u in self.users], indent=4), encoding="utf-8"
        )

    def load(self) -> None:
        """Replace the users with those in the file; a missing file is ignored."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        data = json.loads(text) or []
        self.users = [User.from_json(item) for item in data]