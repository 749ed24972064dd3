[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbglow"
version = "0.1.0"
description = "Game Boy debugging and front-end tools: disassembler, debugger, memory and sprite views, screenshots and a recent-ROM list."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "game boy",
    "gameboy",
    "emulator",
    "debugger",
    "disassembler",
    "sm83",
    "screenshot",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Debuggers",
    "Topic :: Software Development :: Disassemblers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gbglow"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
files = ["gbglow"]
