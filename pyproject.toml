[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scopedstyles"
version = "1.0.0"
description = "Scoped CSS for component-based web code: scope selectors with a generated class and collate the results"
requires-python = ">=3.10"
dependencies = []
keywords = ["css", "scoped-css", "stylesheet", "components", "web"]
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
    "Topic :: Software Development :: Pre-processors",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
scopedstyles-build = "scopedstyles.build:main"

[tool.hatch.build.targets.wheel]
packages = ["scopedstyles"]

[tool.hatch.build.targets.sdist]
include = ["scopedstyles", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
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
