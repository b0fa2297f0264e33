[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hypha"
version = "0.1.0"
description = "Sensor scheduling, settings storage and compact JSON tools for small data-logging boards"
requires-python = ">=3.10"
dependencies = []
keywords = ["sensors", "data-logging", "json", "scheduler", "eeprom"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hypha"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
