[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clikit"
version = "0.1.0"
description = "Typed command-line flags with environment sources, help-line formatting and exit-code handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["cli", "flags", "command-line", "arguments", "options"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
