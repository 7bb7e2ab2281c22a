[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "autopipe"
version = "1.0.0"
description = "Building blocks for node-based automation pipelines: typed actions, node configuration, conditions and log templates"
requires-python = ">=3.10"
dependencies = []
keywords = ["automation", "pipeline", "workflow", "nodes", "actions"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["autopipe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
