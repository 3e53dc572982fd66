[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minirel"
version = "0.1.0"
description = "A small teaching relational storage layer: paged files, a clock buffer pool, catalog record layouts and join hashing"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "storage engine", "buffer pool", "paged file", "relational"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minirel-datagen = "minirel.datagen:main"
minirel-dbdestroy = "minirel.dbdestroy:main"

[tool.hatch.build.targets.wheel]
packages = ["minirel"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
