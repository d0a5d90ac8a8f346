import json

import pytest

from examdesk.users import (
    Admin,
    Role,
    Student,
    Teacher,
    User,
    UserManager,
    create_user,
)


@pytest.mark.parametrize(
    ("role", "cls", "tag"),
    [
        ("Admin", Admin, "[Admin] "),
        ("Teacher", Teacher, "[Teacher] "),
        ("Student", Student, "[Student] "),
    ],
)
def test_create_user_picks_class_by_role(role, cls, tag):
    user = create_user("Ann", role, "ann", "password")
    assert isinstance(user, cls)
    assert user.to_json()["role"] == role
    assert user.describe() == (
        f"{tag}UserID: {user.user_id}, Name: Ann, Role: {role}, Username: ann"
    )


def test_unknown_role_becomes_student():
    user = create_user("Zed", "Janitor", "zed", "password")
    assert isinstance(user, Student)
    assert user.role is Role.STUDENT


def test_ids_are_unique_and_increasing():
    first = create_user("A", "Student", "a", "password")
    second = create_user("B", "Student", "b", "password")
    assert second.user_id == first.user_id + 1


def test_verify_password():
    user = create_user("Ann", "Admin", "ann", "password")
    assert user.verify_password("password")
    assert not user.verify_password("secret")


def test_str_format():
    user = create_user("Ann", "Teacher", "ann", "password")
    assert str(user) == f"[{user.user_id}] Teacher - Ann (ann)"


def test_describe_has_role_tag():
    user = create_user("Ann", "Admin", "ann", "password")
    assert user.describe() == (
        f"[Admin] UserID: {user.user_id}, Name: Ann, Role: Admin, Username: ann"
    )


def test_json_round_trip_keeps_id_and_kind():
    user = create_user("Tom", "Teacher", "tom", "password")
    copy = User.from_json(user.to_json())
    assert copy == user
    assert isinstance(copy, Teacher)
    assert copy.to_json() == user.to_json()


def test_from_json_advances_next_id():
    data = {"id": 50_000, "name": "X", "role": "Admin", "username": "x", "password": "password"}
    loaded = User.from_json(data)
    assert loaded.user_id == 50_000
    fresh = create_user("Y", "Admin", "y", "password")
    assert fresh.user_id > 50_000


def test_from_json_missing_key_raises():
    with pytest.raises(KeyError):
        User.from_json({"id": 1, "name": "X", "role": "Admin"})


def test_manager_register_and_login(tmp_path):
    manager = UserManager(tmp_path / "users.json")
    user = manager.register_user("Ann", "Student", "ann", "password")
    assert manager.login_user("ann", "password") is user
    assert manager.login_user("ann", "secret") is None
    assert manager.login_user("bob", "password") is None


def test_manager_delete_user(tmp_path):
    manager = UserManager(tmp_path / "users.json")
    user = manager.register_user("Ann", "Student", "ann", "password")
    assert manager.delete_user(user.user_id)
    assert manager.users == []
    assert not manager.delete_user(user.user_id)


def test_manager_update_user(tmp_path):
    manager = UserManager(tmp_path / "users.json")
    user = manager.register_user("Ann", "Student", "ann", "password")
    manager.update_user(user.user_id, "Anne")
    assert manager.find_user(user.user_id).name == "Anne"


def test_manager_update_missing_user_raises(tmp_path):
    manager = UserManager(tmp_path / "users.json")
    with pytest.raises(KeyError):
        manager.update_user(-5, "Nobody")


def test_describe_users(tmp_path):
    manager = UserManager(tmp_path / "users.json")
    a = manager.register_user("Ann", "Admin", "ann", "password")
    manager.register_user("Tom", "Teacher", "tom", "password")
    assert len(manager.describe_users()) == 2
    assert manager.describe_users(a.user_id) == [a.describe()]
    with pytest.raises(KeyError):
        manager.describe_users(-1)


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "users.json"
    manager = UserManager(path)
    manager.register_user("Ann", "Admin", "ann", "password")
    manager.register_user("Sue", "Student", "sue", "password")
    manager.save()

    stored = json.loads(path.read_text())
    assert [item["username"] for item in stored] == ["ann", "sue"]

    other = UserManager(path)
    other.load()
    assert [u.to_json() for u in other.users] == [u.to_json() for u in manager.users]
    assert isinstance(other.users[0], Admin)


def test_load_missing_file_leaves_users_empty(tmp_path):
    manager = UserManager(tmp_path / "absent.json")
    manager.load()
    assert manager.users == []