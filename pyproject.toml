[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tasktrack"
version = "0.1.1"
description = "SQLite storage for a dependency-ordered task tracker, with a JSON-RPC 2.0 stdio transport"
requires-python = ">=3.10"
dependencies = []
keywords = ["tasks", "dag", "tracker", "sqlite", "json-rpc"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tasktrack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
