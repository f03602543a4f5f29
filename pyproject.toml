[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatplugins"
version = "0.1.0"
description = "Chat bot feature logic: sign-in scores, sleep tracking, wordle, tarot, hot words, quotation and picture databases, and small web text fetchers"
requires-python = ">=3.10"
keywords = ["chat", "bot", "plugins", "wordle", "tarot", "sqlite", "group chat"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "requests",
    "lxml",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chatplugins"]

[tool.hatch.build.targets.sdist]
include = ["chatplugins", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
