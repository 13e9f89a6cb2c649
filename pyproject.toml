[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "splitty"
version = "0.1.0"
description = "Group expense splitting with balance and settlement calculation, served over a small JSON HTTP API"
requires-python = ">=3.10"
dependencies = []
keywords = ["expenses", "split", "settlement", "bill", "group", "wsgi", "api"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Office/Business :: Financial :: Accounting",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
splitty = "splitty.server:main"

[tool.hatch.build.targets.wheel]
packages = ["splitty"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
