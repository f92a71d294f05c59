[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "euvdlookup"
version = "0.1.0"
description = "Interactive command-line lookup tool and client for the European Union Vulnerability Database API"
requires-python = ">=3.10"
dependencies = []
keywords = ["euvd", "enisa", "vulnerability", "cve", "security", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Information Technology",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
euvdlookup = "euvdlookup.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["euvdlookup"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
