[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cargohack"
version = "0.1.0"
description = "Feature powersets, command-line parsing and help text for running cargo over many feature sets"
requires-python = ">=3.10"
dependencies = []
keywords = ["cargo", "features", "powerset", "testing", "cli"]
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
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cargohack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
