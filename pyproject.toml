[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ttyline"
version = "0.1.0"
description = "Configure and query serial lines through POSIX termios"
requires-python = ">=3.10"
dependencies = []
keywords = ["serial", "uart", "termios", "tty", "rs232", "modem"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ttyline"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
