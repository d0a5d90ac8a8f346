import json

import pytest

from examdesk.reminders import (
    ActivityLog,
    Deadline,
    PriorityReminder,
    Reminder,
    ReminderError,
    ReminderManager,
    reminder_from_json,
)


def _reminder(rid=1, message="Study", date="2024-05-01", exam_id=1000):
    return Reminder(rid, message, Deadline(date, exam_id))


def test_deadline_rejects_empty_date():
    with pytest.raises(ReminderError, match="Invalid deadline parameters"):
        Deadline("", 1000)


def test_deadline_rejects_non_positive_exam():
    with pytest.raises(ReminderError):
        Deadline("2024-05-01", 0)


def test_reminder_rejects_bad_parameters():
    with pytest.raises(ReminderError, match="Invalid reminder parameters"):
        Reminder(0, "Study", Deadline("2024-05-01", 1000))
    with pytest.raises(ReminderError):
        Reminder(1, "", Deadline("2024-05-01", 1000))
    with pytest.raises(ReminderError):
        Reminder(1, "Study", None)


@pytest.mark.parametrize("priority", [0, 6, -1])
def test_priority_out_of_range(priority):
    with pytest.raises(ReminderError, match="Priority must be 1-5"):
        PriorityReminder(1, "Study", Deadline("2024-05-01", 1000), priority)


def test_describe_formats():
    assert _reminder().describe() == "[1] Study (Due: 2024-05-01)"
    pr = PriorityReminder(2, "Revise", Deadline("2024-06-01", 1001), 3)
    assert pr.describe() == "[2] Revise (Due: 2024-06-01) [PRIORITY: 3/5]"


def test_json_round_trip():
    pr = PriorityReminder(2, "Revise", Deadline("2024-06-01", 1001), 4)
    data = pr.to_json()
    assert data["priority"] == 4
    assert data["deadline"] == {"dueDate": "2024-06-01", "examID": 1001}
    back = reminder_from_json(data)
    assert isinstance(back, PriorityReminder)
    assert back.to_json() == data

    plain = reminder_from_json(_reminder().to_json())
    assert type(plain) is Reminder
    assert "priority" not in plain.to_json()


def test_reminder_from_json_malformed():
    with pytest.raises(ReminderError):
        reminder_from_json({"id": 1, "message": "x"})


def test_activity_log_empty_raises_and_lists():
    log = ActivityLog()
    with pytest.raises(ReminderError, match="No logs available"):
        log.lines()
    log.add("hello")
    assert log.lines() == ["LOG: hello"]
    log.clear()
    assert len(log) == 0


def test_add_reminder_none_raises():
    manager = ReminderManager()
    with pytest.raises(ReminderError, match="Cannot add null reminder"):
        manager.add_reminder(None)


def test_priority_reminder_goes_first():
    manager = ReminderManager()
    manager.add_reminder(_reminder(1))
    pr = PriorityReminder(2, "Urgent", Deadline("2024-05-02", 1000), 5)
    manager.add_priority_reminder(pr)
    assert [r.reminder_id for r in manager.reminders] == [2, 1]
    assert manager.activity_lines()[-1] == "LOG: Added PRIORITY reminder ID: 2"


def test_add_priority_rejects_plain_reminder():
    manager = ReminderManager()
    with pytest.raises(ReminderError, match="Invalid priority reminder cast"):
        manager.add_priority_reminder(_reminder())
    assert manager.reminders == []
    assert manager.activity_lines() == ["LOG: Error: Invalid priority reminder cast"]


def test_send_reminders():
    manager = ReminderManager()
    with pytest.raises(ReminderError, match="No reminders to send"):
        manager.send_reminders()
    manager.add_reminder(_reminder(1))
    manager.add_reminder(_reminder(2))
    sent = manager.send_reminders()
    assert [r.reminder_id for r in sent] == [1, 2]
    assert all(r.is_sent for r in manager.reminders)
    assert manager.sent_status == {1: True, 2: True}
    assert manager.send_reminders() == []


def test_describe_all():
    manager = ReminderManager()
    assert manager.describe_all() == "No reminders available"
    manager.add_reminder(_reminder(1))
    assert manager.describe_all() == _reminder(1).describe()


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "reminders.json"
    manager = ReminderManager(path)
    manager.add_reminder(_reminder(1))
    manager.add_priority_reminder(PriorityReminder(2, "Urgent", Deadline("2024-05-02", 1000), 2))
    manager.save()

    other = ReminderManager(path)
    other.load()
    assert [r.to_json() for r in other.reminders] == [r.to_json() for r in manager.reminders]


def test_load_missing_creates_empty_file(tmp_path):
    path = tmp_path / "reminders.json"
    manager = ReminderManager(path)
    manager.load()
    assert json.loads(path.read_text()) == []
    assert manager.reminders == []
    assert manager.activity_lines()[0].startswith("LOG: Created new empty reminders file")


def test_load_skips_bad_items(tmp_path):
    path = tmp_path / "reminders.json"
    good = _reminder(3).to_json()
    path.write_text(json.dumps([good, {"id": 4}]))
    manager = ReminderManager(path)
    manager.load()
    assert [r.reminder_id for r in manager.reminders] == [3]
    assert "LOG: Warning: Failed to parse reminder from JSON" in manager.activity_lines()


def test_load_invalid_json_raises(tmp_path):
    path = tmp_path / "reminders.json"
    path.write_text("{not json")
    with pytest.raises(ReminderError):
        ReminderManager(path).load()


def test_clear_all():
    manager = ReminderManager()
    manager.add_reminder(_reminder(1))
    manager.send_reminders()
    manager.clear_all()
    assert manager.reminders == []
    assert manager.sent_status == {}
    with pytest.raises(ReminderError):
        manager.activity_lines()