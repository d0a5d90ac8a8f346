[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "examdesk"
version = "0.1.0"
description = "A console exam desk: users, exams, timed sessions, grading, report cards and reminders"
requires-python = ">=3.10"
keywords = ["exam", "grading", "quiz", "education", "report-card", "console"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education :: Testing",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
examdesk = "examdesk.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["examdesk"]

[tool.pytest.ini_options]
addopts = "-ra"
