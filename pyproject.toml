[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ccprims"
version = "0.1.0"
description = "Concurrency primitives for threaded Python: spin, ticket, CLH and MCS locks, sequence locks, a lock-free stack, queue and sorted list, concurrent list sets and a doubly-linked list."
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "locks", "lock-free", "seqlock", "queue", "stack", "linked list"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ccprims"]

[tool.pytest.ini_options]
addopts = "-ra"
