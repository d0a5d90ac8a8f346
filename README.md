# examdesk

examdesk is an exam desk that runs in the terminal. It has one menu-driven console, and from it you can:

- **register users** with the role Admin, Teacher or Student, and log them in and out;
- **write exams** with multiple-choice and descriptive questions (Admin or Teacher);
- **sit exams** as a student, with a minute timer and an answer sheet that is saved to a file and can be read back;
- **grade sessions**, list results per student, build report cards and show score statistics for each exam (Teacher);
- **manage reminders** for exam deadlines, priority reminders among them (Student).

All data is kept as JSON files in one directory:

- `users.json`
- `exams.json`
- `reminders.json`
- `session_<student>_<exam>.json`
- `result_<student>_<exam>.json`
- `report_<student>.json`

## Installation

```
pip install .
```

## Usage

Start the console in the current directory:

```
examdesk
```

To keep the data files somewhere else, name the directory. It is created if it does not exist:

```
examdesk --dir path/to/data
```

The main menu offers these choices:

1. User Management. Open to everyone, so that the first accounts can be created.
2. Login
3. Logout
4. Exam Management (Admin/Teacher)
5. Exam Session (Student)
6. Grading System (Teacher)
7. Reminder Management (Student)
8. Exit. Saves users, exams, open sessions and reminders, then quits.

When a menu needs a role that the current user does not have, the console asks for a username and password first. Leaving Exam Management or Reminder Management logs the current user out. Finishing an exam writes that session's file straight away.

## Using the library

The parts behind the console can be used directly from Python:

```python
from examdesk.exams import ExamManager
from examdesk.sessions import SessionManager
from examdesk.grading import GradingSystem, ExamGrader

exams = ExamManager("exams.json")
exam_id = exams.create_exam("Physics", 60)
question_id = exams.add_mcq_question(
    exam_id, "Unit of force?", "A", ["Newton", "Joule", "Watt", "Pascal"]
)

sessions = SessionManager(exams, ".")
session = sessions.start_session(1, exam_id)
session.submit_answer(question_id, "A")
sessions.end_session(1, exam_id)        # writes session_1_<exam>.json

grader = ExamGrader(GradingSystem(), exams, sessions, ".")
result = grader.grade_session(session)  # writes result_1_<exam>.json
print(result.describe())
```

Each part lives in its own module:

- `examdesk.users`: `UserManager` and the user classes.
- `examdesk.exams`: `ExamManager`, `Exam`, `MCQ` and `Descriptive`.
- `examdesk.sessions`: `SessionManager`, `ExamSession`, `AnswerSheet` and `Timer`.
- `examdesk.grading`: `GradingSystem`, `ExamGrader`, `ReportCard` and the result classes.
- `examdesk.reminders`: `ReminderManager`, `Reminder`, `PriorityReminder` and `Deadline`.
- `examdesk.cli`: `Application`.

When something goes wrong, these modules raise `ExamError`, `GradingError` or `ReminderError`.

## Limitations

- Graded results and report cards are kept in memory for as long as the console runs. They are written to `result_*.json` and `report_*.json`, but they are not read back when the console starts again. `examdesk.grading.load_result` can read a single result file.
- The exam timer is not stored. A session read back from its file has no timer running, so it shows zero minutes remaining.
- Passwords are stored in `users.json` as plain text.
- Everything runs on one machine, through files in one directory. There is no server and no network access.

## Running the tests

```
pip install .[test]
pytest
```