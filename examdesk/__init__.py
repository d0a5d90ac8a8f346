"""Console exam desk: users, exams, timed sessions, grading, report cards and reminders."""

__version__ = "0.1.0"