[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sqtool"
version = "0.1.0"
description = "Core of a SQL query editor: alias resolution, syntax highlighting, settings, result tables and time charts"
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "postgresql", "highlighting", "autocomplete", "database", "chart"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sqtool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
