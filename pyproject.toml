[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "svgviewkit"
version = "0.1.0"
description = "Model-layer helpers for an SVG viewer: SVG text overlay extraction, CSS class inlining, document loading, system menu shortcuts and tick timers"
requires-python = ">=3.10"
dependencies = []
keywords = ["svg", "viewer", "text-overlay", "css", "menu", "shortcuts", "timer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Viewers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["svgviewkit"]

[tool.hatch.build.targets.sdist]
include = ["svgviewkit", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
