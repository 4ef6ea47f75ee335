[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "turbine"
version = "0.2.1"
description = "Runtime core for the Turbine scripting language: garbage-collected heap objects, value containers and call stack"
requires-python = ">=3.10"
dependencies = []
keywords = ["interpreter", "virtual machine", "garbage collector", "runtime", "scripting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["turbine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
