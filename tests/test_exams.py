import json

import pytest

from examdesk.exams import (
    MCQ,
    Descriptive,
    Exam,
    ExamError,
    ExamManager,
    question_from_json,
)


@pytest.fixture
def manager(tmp_path):
    return ExamManager(tmp_path / "exams.json")


def test_first_exam_id_is_1000(manager):
    assert manager.create_exam("Maths", 60) == 1000
    assert manager.create_exam("Physics", 30) == 1001


def test_question_ids_increase_across_exams(manager):
    a = manager.create_exam("Maths", 60)
    b = manager.create_exam("Physics", 30)
    q1 = manager.add_descriptive_question(a, "What is 2+2?", "4")
    q2 = manager.add_mcq_question(b, "Pick A", "A", ["a", "b", "c", "d"])
    assert q1 == 1
    assert q2 == q1 + 1


def test_add_question_to_missing_exam_raises(manager):
    with pytest.raises(ExamError):
        manager.add_descriptive_question(4242, "Text", "Answer")


def test_add_question_dispatches_on_type(manager):
    exam_id = manager.create_exam("Maths", 60)
    manager.add_question(exam_id, "Pick", "MCQ", "B", ["w", "x", "y", "z"])
    manager.add_question(exam_id, "Explain", "Descriptive", "because")
    questions = manager.get_exam_questions(exam_id)
    assert isinstance(questions[0], MCQ)
    assert questions[0].options == ["w", "x", "y", "z"]
    assert isinstance(questions[1], Descriptive)


def test_exam_add_none_raises():
    with pytest.raises(ExamError):
        Exam(1, "S", 10).add_question(None)


def test_check_answers():
    exam = Exam(1, "S", 10)
    exam.add_question(Descriptive(2, "two", "2"))
    exam.add_question(MCQ(1, "one", "A", ["x", "y"]))
    exam.add_question(Descriptive(3, "three", "3"))
    results = exam.check_answers({1: "A", 2: "wrong"})
    assert results == {1: True, 2: False, 3: False}
    assert list(results) == sorted(results)


def test_modify_question(manager):
    exam_id = manager.create_exam("Maths", 60)
    qid = manager.add_descriptive_question(exam_id, "Old", "a")
    manager.modify_question(exam_id, qid, "New")
    assert manager.get_exam(exam_id).questions[0].text == "New"


def test_modify_missing_question_raises(manager):
    exam_id = manager.create_exam("Maths", 60)
    with pytest.raises(ExamError, match="Question ID not found"):
        manager.modify_question(exam_id, 999, "New")


def test_remove_question(manager):
    exam_id = manager.create_exam("Maths", 60)
    keep = manager.add_descriptive_question(exam_id, "Keep", "a")
    gone = manager.add_descriptive_question(exam_id, "Gone", "b")
    manager.remove_question(exam_id, gone)
    assert [q.question_id for q in manager.get_exam_questions(exam_id)] == [keep]


def test_copies_are_independent(manager):
    exam_id = manager.create_exam("Maths", 60)
    manager.add_mcq_question(exam_id, "Pick", "A", ["a", "b"])
    copies = manager.get_exam_questions(exam_id)
    copies[0].text = "Changed"
    copies[0].options.append("c")
    original = manager.get_exam(exam_id).questions[0]
    assert original.text == "Pick"
    assert original.options == ["a", "b"]


def test_delete_exam(manager):
    exam_id = manager.create_exam("Maths", 60)
    manager.delete_exam(exam_id)
    assert manager.get_exam(exam_id) is None
    with pytest.raises(ExamError):
        manager.get_exam_subject(exam_id)


def test_exam_details(manager):
    exam_id = manager.create_exam("Maths", 45)
    assert manager.get_exam_subject(exam_id) == "Maths"
    assert manager.get_exam_duration(exam_id) == 45


def test_describe_formats(manager):
    exam_id = manager.create_exam("Maths", 45)
    manager.add_mcq_question(exam_id, "Pick", "A", ["yes", "no"])
    lines = manager.describe_exam(exam_id).splitlines()
    assert lines[0] == f"Exam ID: {exam_id}, Subject: Maths, Duration: 45 mins"
    assert lines[2] == "A) yes"
    assert lines[3] == "B) no"
    assert Descriptive(7, "Why?", "x").describe() == "Q7: Why? [Descriptive]"


def test_mcq_str():
    assert str(MCQ(1, "Pick", "A", ["a", "b", "c"])) == "MCQ: Pick (3 options)"


def test_question_json_round_trip():
    mcq = MCQ(3, "Pick", "B", ["a", "b"])
    desc = Descriptive(4, "Why", "because")
    assert question_from_json(mcq.to_json()) == mcq
    assert question_from_json(desc.to_json()) == desc
    assert mcq.to_json()["type"] == "MCQ"


def test_exam_json_round_trip():
    exam = Exam(1000, "Maths", 60, [MCQ(1, "Pick", "A", ["a"]), Descriptive(2, "Why", "x")])
    assert Exam.from_json(exam.to_json()) == exam


def test_save_and_load(tmp_path):
    path = tmp_path / "exams.json"
    manager = ExamManager(path)
    exam_id = manager.create_exam("Maths", 60)
    manager.add_mcq_question(exam_id, "Pick", "A", ["a", "b", "c", "d"])
    manager.save()

    stored = json.loads(path.read_text())
    assert stored[0]["examID"] == exam_id

    other = ExamManager(path)
    other.load()
    assert other.get_exam(exam_id) == manager.get_exam(exam_id)


def test_new_ids_after_load_do_not_collide(tmp_path):
    path = tmp_path / "exams.json"
    manager = ExamManager(path)
    exam_id = manager.create_exam("Maths", 60)
    qid = manager.add_descriptive_question(exam_id, "Why", "x")
    manager.save()

    other = ExamManager(path)
    other.load()
    new_exam = other.create_exam("Physics", 30)
    new_q = other.add_descriptive_question(new_exam, "How", "y")
    assert new_exam not in (exam_id,)
    assert other.get_exam(exam_id).subject == "Maths"
    assert new_q > qid


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ExamError):
        ExamManager(tmp_path / "absent.json").load()